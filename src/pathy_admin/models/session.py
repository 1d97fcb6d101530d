"""
Admin session and permission models.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    SUPER_ADMIN = "super-admin"
    ADMIN = "admin"
    TEAM_MEMBER = "team-member"

    @classmethod
    def parse(cls, value: Optional[str], default: "Role") -> "Role":
        if not value:
            return default
        try:
            return cls(value.replace("_", "-"))
        except ValueError:
            return default

    @property
    def grants_all(self) -> bool:
        return self is not Role.TEAM_MEMBER


class Feature(str, Enum):
    DASHBOARD = "dashboard"
    USERS = "users"
    PAYMENTS = "payments"
    STORIES = "stories"
    VIDEOS = "videos"
    DIET_PLANS = "dietPlans"
    PRODUCTS = "products"
    TEAMS = "teams"
    CHATS = "chats"
    NOTIFICATIONS = "notifications"
    DAILY_UPDATES = "dailyUpdates"
    CONSULTATIONS = "consultations"
    ORDERS = "orders"


class Capability(BaseModel):
    read: bool = False
    write: bool = False


def _normalize_permissions(raw: Any) -> dict[str, Capability]:
    if not isinstance(raw, dict):
        return {}
    permissions: dict[str, Capability] = {}
    for name, value in raw.items():
        if isinstance(value, bool):
            permissions[name] = Capability(read=value, write=value)
        elif isinstance(value, dict):
            permissions[name] = Capability(read=bool(value.get("read")), write=bool(value.get("write")))
        elif isinstance(value, Capability):
            permissions[name] = value
    return permissions


class AdminSession(BaseModel):
    """Credentials of the signed-in operator. Replaced wholesale on login/logout."""

    token: str
    role: Role
    email: Optional[str] = None
    user_id: Optional[str] = None
    full_name: Optional[str] = None
    permissions: dict[str, Capability] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("permissions", mode="before")
    @classmethod
    def _coerce_permissions(cls, value: Any) -> dict[str, Capability]:
        return _normalize_permissions(value)

    def has_capability(self, feature: "Feature | str", write: bool = False) -> bool:
        if self.role.grants_all:
            return True
        name = feature.value if isinstance(feature, Feature) else feature
        capability = self.permissions.get(name)
        if capability is None:
            return False
        return capability.write if write else capability.read

    @property
    def agent_id(self) -> str:
        return self.user_id or self.email or "admin"
