"""
Team REST API.
"""

from __future__ import annotations

from pydantic import ValidationError as ModelValidationError

from pathy_admin.errors import ValidationError
from pathy_admin.models.records import TeamMember
from pathy_admin.transport.http import HttpClient, extract_list


class TeamsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self) -> list[TeamMember]:
        result = await self._http.get("/teams")
        return [TeamMember.model_validate(m) for m in extract_list(result, "teams")]

    async def me(self) -> TeamMember:
        """The signed-in team member's own record, permissions included."""
        result = await self._http.get("/teams/me")
        if isinstance(result, dict) and isinstance(result.get("user"), dict):
            result = result["user"]
        try:
            return TeamMember.model_validate(result)
        except ModelValidationError as e:
            raise ValidationError("Malformed team member record", code="bad_response") from e
