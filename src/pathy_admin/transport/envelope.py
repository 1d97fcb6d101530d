"""
Channel payload construction and parsing.
"""

from typing import Any, Optional

from pathy_admin.models.chat import ChatEvent
from pathy_admin.models.events import S2C_ALIASES, Participant, PresencePayload, S2CEvent

CHAT_EVENTS = {
    S2CEvent.NEW_MESSAGE,
    S2CEvent.TYPING,
    S2CEvent.STOP_TYPING,
    S2CEvent.CHAT_RESOLVED,
    S2CEvent.ERROR,
}


def build_presence(chat_id: str, participant: Participant) -> dict[str, Any]:
    """Build a joinChat/typing/stopTyping body ready for Socket.IO emit."""
    payload = PresencePayload(chat_id=chat_id, user_type=participant.user_type, user_id=participant.user_id)
    return payload.model_dump(by_alias=True)


def parse_event(event: str, raw: dict[str, Any]) -> Optional[ChatEvent]:
    """Normalize a relay event. Returns None for events the chat view does not consume."""
    name = S2C_ALIASES.get(event, event)
    if name not in CHAT_EVENTS:
        return None
    chat_id = raw.get("chatId")
    if chat_id is not None:
        chat_id = str(chat_id)
    return ChatEvent(type=name, chat_id=chat_id, data=raw)
