"""
Back-office record models — users, orders, consultations, daily updates, team.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Flag(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class UserRecord(BaseModel):
    id: str = Field(alias="_id")
    full_name: str = Field(default="", alias="fullName")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    age: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    flag: Optional[Flag] = None
    score: Optional[float] = None
    photo: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("age", "weight", "height", "score", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("flag", mode="before")
    @classmethod
    def _unknown_flag(cls, value: Any) -> Any:
        if value not in {f.value for f in Flag}:
            return None
        return value


class ContactInfo(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class OrderItem(BaseModel):
    name: Optional[str] = None
    quantity: int = 1
    price: Optional[float] = None


class Order(BaseModel):
    id: str = Field(alias="_id")
    contact_info: ContactInfo = Field(default_factory=ContactInfo, alias="contactInfo")
    customer_email: Optional[str] = None
    items: list[OrderItem] = Field(default_factory=list)
    total: float = 0
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    status: str = OrderStatus.PENDING.value
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Order":
        user = raw.get("userId")
        email = user.get("email") if isinstance(user, dict) else None
        return cls.model_validate({**raw, "customer_email": email})


class Consultation(BaseModel):
    id: str = Field(alias="_id")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    message: Optional[str] = None
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    status: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _assignee_name(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("fullName") or value.get("_id")
        return value

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class DailyUpdate(BaseModel):
    id: str = Field(alias="_id")
    title: str = ""
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "DailyUpdate":
        user = raw.get("user")
        if isinstance(user, dict):
            return cls.model_validate({**raw, "user_id": user.get("_id"), "user_name": user.get("fullName")})
        return cls.model_validate({**raw, "user_id": raw.get("userId")})


class TeamMember(BaseModel):
    id: str = Field(alias="_id")
    full_name: str = Field(default="", alias="fullName")
    email: Optional[str] = None
    permissions: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}
