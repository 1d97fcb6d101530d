"""
Chats REST API — conversation history, replies and resolution.

Replies go over REST for durability; the relay fans the stored message back
out on the chat channel.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError as ModelValidationError

from pathy_admin.attachments import OutgoingAttachment
from pathy_admin.errors import ChatError, ValidationError
from pathy_admin.models.chat import Conversation, Message
from pathy_admin.transport.http import HttpClient, extract_list

logger = logging.getLogger(__name__)


def check_reply(text: Optional[str], attachment: Optional[OutgoingAttachment]) -> str:
    """Normalize reply text; reject a reply with neither text nor attachment."""
    body = (text or "").strip()
    if not body and attachment is None:
        raise ValidationError("Message must contain text or an attachment.", code="empty_message")
    return body


def _conversation(raw: Any) -> Conversation:
    try:
        return Conversation.model_validate(raw)
    except ModelValidationError as e:
        raise ChatError(
            f"Malformed conversation in server response ({e.error_count()} errors)",
            code="bad_response",
        ) from e


class ChatsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self, limit: int = 20) -> list[Conversation]:
        """Most recent conversations first."""
        result = await self._http.get("/chat", params={"limit": limit})
        return [_conversation(c) for c in extract_list(result, "chats")]

    async def get(self, chat_id: str) -> Conversation:
        result = await self._http.get(f"/chat/{chat_id}")
        if isinstance(result, dict) and isinstance(result.get("chat"), dict):
            result = result["chat"]
        return _conversation(result)

    async def reply(
        self,
        chat_id: str,
        agent_id: str,
        text: Optional[str] = None,
        attachment: Optional[OutgoingAttachment] = None,
    ) -> Optional[Message]:
        """Send an agent reply. Returns the stored message when the server echoes it."""
        body = check_reply(text, attachment)
        fields = {"text": body, "agentId": agent_id}
        if attachment is not None:
            result = await self._http.submit_form(
                f"/chat/{chat_id}/reply", fields, files={"media": attachment.as_file()},
            )
        else:
            result = await self._http.post(f"/chat/{chat_id}/reply", fields)
        return self._stored_message(result, chat_id)

    async def resolve(self, chat_id: str) -> Any:
        return await self._http.put(f"/chat/{chat_id}/resolve")

    @staticmethod
    def _stored_message(result: Any, chat_id: str) -> Optional[Message]:
        # The reply is already stored; an unreadable echo only loses the local copy
        if not isinstance(result, dict):
            return None
        raw = result.get("message") if isinstance(result.get("message"), dict) else result
        if "sender" not in raw:
            return None
        try:
            message = Message.model_validate(raw)
        except ModelValidationError as e:
            logger.warning("Ignoring malformed reply echo for chat %s: %s", chat_id, e.error_count())
            return None
        if message.chat_id is None:
            message = message.model_copy(update={"chat_id": chat_id})
        return message
