"""
Daily updates REST API — progress posts submitted by users.
"""

from __future__ import annotations

from pathy_admin.models.records import DailyUpdate
from pathy_admin.transport.http import HttpClient, extract_list


class DailyUpdatesAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self) -> list[DailyUpdate]:
        result = await self._http.get("/daily-updates")
        return [DailyUpdate.from_api(u) for u in extract_list(result, "dailyUpdates")]

    async def for_user(self, user_id: str) -> list[DailyUpdate]:
        return [u for u in await self.list() if u.user_id == user_id]
