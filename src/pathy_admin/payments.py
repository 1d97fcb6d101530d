"""
Payments REST API — server-side aggregated analytics.
"""

from typing import Any

from pathy_admin.transport.http import HttpClient


class PaymentsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def analytics(self) -> dict[str, Any]:
        """Totals and a breakdown by payment type."""
        result = await self._http.get("/payments/analytics")
        if isinstance(result, dict) and isinstance(result.get("analytics"), dict):
            return result["analytics"]
        return result if isinstance(result, dict) else {}
