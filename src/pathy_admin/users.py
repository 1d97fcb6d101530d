"""
Users REST API — scored user list and profile CRUD.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from pathy_admin.attachments import OutgoingAttachment
from pathy_admin.errors import ValidationError
from pathy_admin.models.records import Flag, UserRecord
from pathy_admin.transport.http import HttpClient, extract_list

PROFILE_FIELDS = ("fullName", "phoneNumber", "age", "weight", "height", "goal")


def _profile_form(profile: dict[str, Any], fields: Iterable[str] = PROFILE_FIELDS) -> dict[str, str]:
    return {name: "" if profile.get(name) is None else str(profile[name]) for name in fields}


class UsersAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list_scores(self) -> list[UserRecord]:
        """All users with their scores and flags."""
        result = await self._http.get("/user/all/scores")
        return [UserRecord.model_validate(u) for u in extract_list(result, "users")]

    async def create(self, profile: dict[str, Any], photo: Optional[OutgoingAttachment] = None) -> Any:
        if not str(profile.get("fullName") or "").strip() or not str(profile.get("phoneNumber") or "").strip():
            raise ValidationError("Full name and phone number are required.", code="missing_fields")
        files = {"photo": photo.as_file()} if photo is not None else None
        return await self._http.submit_form("/user/create-user", _profile_form(profile), files=files)

    async def update(self, user_id: str, profile: dict[str, Any], photo: Optional[OutgoingAttachment] = None) -> Any:
        """Partial update: only the profile fields present in ``profile`` are sent."""
        fields = [name for name in PROFILE_FIELDS if name in profile]
        if not fields and photo is None:
            raise ValidationError("Nothing to update.", code="empty_update")
        files = {"photo": photo.as_file()} if photo is not None else None
        return await self._http.submit_form(
            f"/user/update-user/{user_id}", _profile_form(profile, fields), files=files, method="PUT",
        )

    async def set_flag(self, user_id: str, flag: "Flag | str") -> Any:
        try:
            value = Flag(flag).value
        except ValueError:
            raise ValidationError(f"Unknown flag: {flag}", code="bad_flag")
        return await self._http.put(f"/user/update-user/{user_id}", {"flag": value})

    async def delete(self, user_id: str) -> Any:
        return await self._http.delete(f"/user/delete-user/{user_id}")
