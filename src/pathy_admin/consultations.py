"""
Consultations REST API — booking requests and team assignment.
"""

from __future__ import annotations

from typing import Any, Optional

from pathy_admin.models.records import Consultation
from pathy_admin.transport.http import HttpClient, extract_list


class ConsultationsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self, limit: Optional[int] = None) -> list[Consultation]:
        params = {"limit": limit} if limit else None
        result = await self._http.get("/consultancy/all", params=params)
        return [Consultation.model_validate(c) for c in extract_list(result, "consultations")]

    async def assign(self, consultation_id: str, team_member_id: Optional[str]) -> Any:
        """Assign to a team member; ``None`` clears the assignment."""
        return await self._http.put(
            f"/consultancy/{consultation_id}/assign", {"teamMemberId": team_member_id},
        )
