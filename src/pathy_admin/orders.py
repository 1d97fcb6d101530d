"""
Orders REST API.
"""

from __future__ import annotations

from typing import Any, Optional

from pathy_admin.errors import ValidationError
from pathy_admin.models.records import Order, OrderStatus
from pathy_admin.transport.http import HttpClient, extract_list


class OrdersAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self, limit: Optional[int] = None) -> list[Order]:
        params = {"limit": limit} if limit else None
        result = await self._http.get("/orders", params=params)
        return [Order.from_api(o) for o in extract_list(result, "orders")]

    async def update_status(self, order_id: str, status: "OrderStatus | str") -> Any:
        try:
            value = OrderStatus(status).value
        except ValueError:
            raise ValidationError(f"Unknown order status: {status}", code="bad_status")
        return await self._http.put(f"/orders/{order_id}/status", {"status": value})
