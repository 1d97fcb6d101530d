"""
Auth module — admin and team-member password login.

Both flows return a complete ``AdminSession``; the caller replaces whatever
session it held before.
"""

import logging
from typing import Any

from pathy_admin.errors import AuthError, PathyAdminError
from pathy_admin.models.session import AdminSession, Role
from pathy_admin.session_store import token_claims
from pathy_admin.teams import TeamsAPI
from pathy_admin.transport.http import HttpClient

logger = logging.getLogger(__name__)


class Auth:
    def __init__(self, http: HttpClient):
        self._http = http
        self._teams = TeamsAPI(http)

    async def login(self, email: str, password: str) -> AdminSession:
        """Admin / super-admin login."""
        try:
            result = await self._http.post("/admin/login", {"email": email, "password": password}, authenticated=False)
        except PathyAdminError as e:
            raise AuthError(f"Login failed: {e}")
        token = result.get("token") if isinstance(result, dict) else None
        if not token:
            raise AuthError("Login failed: no token in response", code="no_token")
        claims = token_claims(token)
        if claims is None:
            raise AuthError("Login failed: server returned an unusable token", code="bad_token")
        self._http.set_token(token)
        return AdminSession(
            token=token,
            role=Role.parse(claims.get("role"), default=Role.ADMIN),
            email=claims.get("email", email),
            user_id=claims.get("id") or claims.get("userId"),
        )

    async def team_login(self, email: str, password: str) -> AdminSession:
        """Team-member login. Permissions come from the returned user record."""
        try:
            result = await self._http.post("/teams/login", {"email": email, "password": password}, authenticated=False)
        except PathyAdminError as e:
            raise AuthError(f"Team login failed: {e}")
        if not isinstance(result, dict) or not result.get("token"):
            raise AuthError("Team login failed: no token in response", code="no_token")
        token = result["token"]
        if token_claims(token) is None:
            raise AuthError("Team login failed: server returned an unusable token", code="bad_token")
        self._http.set_token(token)
        return self._team_session(token, result.get("user") or {}, fallback_email=email)

    async def refresh_team_member(self, session: AdminSession) -> AdminSession:
        """Re-read a restored team member's record. Falls back to an empty permission map."""
        if session.role is not Role.TEAM_MEMBER:
            return session
        try:
            member = await self._teams.me()
        except PathyAdminError as e:
            logger.warning("Could not refresh team member %s: %s", session.email, e)
            return AdminSession(token=session.token, role=Role.TEAM_MEMBER, email=session.email,
                                user_id=session.user_id, full_name=session.full_name)
        return AdminSession(
            token=session.token,
            role=Role.TEAM_MEMBER,
            email=member.email or session.email,
            user_id=member.id,
            full_name=member.full_name or session.full_name,
            permissions=member.permissions,
        )

    @staticmethod
    def _team_session(token: str, user: dict[str, Any], fallback_email: Any = None) -> AdminSession:
        return AdminSession(
            token=token,
            role=Role.TEAM_MEMBER,
            email=user.get("email") or fallback_email,
            user_id=user.get("_id") or user.get("id"),
            full_name=user.get("fullName"),
            permissions=user.get("permissions") or {},
        )
