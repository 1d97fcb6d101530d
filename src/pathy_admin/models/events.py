"""
Chat channel event names and payloads.
"""

from pydantic import BaseModel, Field


class C2SEvent:
    """Client -> server."""

    JOIN_CHAT = "joinChat"
    TYPING = "typing"
    STOP_TYPING = "stopTyping"


class S2CEvent:
    """Server -> client."""

    NEW_MESSAGE = "newMessage"
    TYPING = "typing"
    STOP_TYPING = "stopTyping"
    CHAT_RESOLVED = "chatResolved"
    ERROR = "error"


# Names the relay uses when rebroadcasting presence to other participants
S2C_ALIASES = {
    "userTyping": S2CEvent.TYPING,
    "userStoppedTyping": S2CEvent.STOP_TYPING,
}

SYSTEM_EVENTS = {"connect", "disconnect", "connect_error"}


class Participant(BaseModel):
    """Who is on the other end of a presence event."""

    user_type: str = Field(alias="userType")
    user_id: str = Field(alias="userId")

    model_config = {"populate_by_name": True, "frozen": True}


class PresencePayload(BaseModel):
    """joinChat / typing / stopTyping body."""

    chat_id: str = Field(alias="chatId")
    user_type: str = Field(alias="userType")
    user_id: str = Field(alias="userId")

    model_config = {"populate_by_name": True}
