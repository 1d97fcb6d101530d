"""
Conversation and message models for the support chat.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ConversationStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"


class SenderRole(str, Enum):
    CUSTOMER = "customer"
    AGENT = "agent"


class AttachmentKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "pdf"  # wire value


class Attachment(BaseModel):
    kind: AttachmentKind = Field(alias="type")
    url: str = ""
    file_name: Optional[str] = Field(default=None, alias="fileName")
    file_size: Optional[int] = Field(default=None, alias="fileSize")

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    id: Optional[str] = Field(default=None, alias="_id")
    chat_id: Optional[str] = Field(default=None, alias="chatId")
    sender: SenderRole
    sender_id: Optional[str] = Field(default=None, alias="senderId")
    text: Optional[str] = None
    media: Optional[Attachment] = None
    timestamp: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("sender", mode="before")
    @classmethod
    def _non_customer_is_agent(cls, value: Any) -> Any:
        # The relay tags staff replies as "agent", "admin" or a team role
        if isinstance(value, str) and value != SenderRole.CUSTOMER.value:
            return SenderRole.AGENT.value
        return value

    @property
    def key(self) -> str:
        """Identity used to de-duplicate snapshot and live copies of a message."""
        if self.id:
            return self.id
        media_url = self.media.url if self.media else ""
        return f"{self.sender.value}:{self.timestamp}:{self.text or ''}:{media_url}"


class AgentRef(BaseModel):
    id: str = Field(alias="_id")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None

    model_config = {"populate_by_name": True}


class Conversation(BaseModel):
    id: str = Field(alias="_id")
    customer_name: str = Field(default="", alias="customerName")
    customer_email: str = Field(default="", alias="customerEmail")
    category: str = Field(default="", alias="chatType")
    status: ConversationStatus = ConversationStatus.OPEN
    assigned_to: Optional[AgentRef] = Field(default=None, alias="assignedTo")
    messages: list[Message] = Field(default_factory=list)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _agent_from_id(cls, value: Any) -> Any:
        # Unpopulated references arrive as a bare id string
        if isinstance(value, str):
            return {"_id": value}
        return value

    @property
    def is_open(self) -> bool:
        return self.status == ConversationStatus.OPEN

    @property
    def category_label(self) -> str:
        return self.category.replace("_", " ").upper()


class ChatEvent:
    """A channel event scoped to one conversation."""

    __slots__ = ("type", "chat_id", "data")

    def __init__(self, type: str, chat_id: Optional[str], data: dict[str, Any]):
        self.type = type
        self.chat_id = chat_id
        self.data = data

    def __repr__(self) -> str:
        return f"ChatEvent(type={self.type!r}, chat_id={self.chat_id!r})"
