"""
Chat view model — one conversation's rendered state.

Reconciles the REST snapshot with live channel events:

- ``loading -> loaded(open) -> loaded(resolved)``; resolution is final.
- Messages are keyed by identity, so a message delivered both live and in
  the snapshot (the join/fetch gap) appears once.
- Live events that arrive before the snapshot are held and merged after it.
- Once resolved, live appends are refused and the reply box is gone.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError as ModelValidationError

from pathy_admin.attachments import OutgoingAttachment
from pathy_admin.chat import ChatChannel
from pathy_admin.chats import ChatsAPI, check_reply
from pathy_admin.errors import ChatError, PathyAdminError
from pathy_admin.models.chat import ChatEvent, Conversation, ConversationStatus, Message
from pathy_admin.models.events import Participant, S2CEvent

logger = logging.getLogger(__name__)


class ViewState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class ChatView:
    def __init__(
        self,
        chat_id: str,
        chats: ChatsAPI,
        channel: Optional[ChatChannel],
        agent_id: str,
        on_change: Optional[Callable[["ChatView"], None]] = None,
    ):
        self.chat_id = chat_id
        self._chats = chats
        self._channel = channel
        self._agent_id = agent_id
        self._on_change = on_change

        self.state = ViewState.LOADING
        self.error: Optional[str] = None
        self.send_error: Optional[str] = None

        self._meta: Optional[Conversation] = None
        self._messages: list[Message] = []
        self._keys: set[str] = set()
        self._pending: list[Message] = []
        self._resolved = False
        self._typing: set[Participant] = set()
        self._live = False
        self._closed = False

    # -- rendered state ---------------------------------------------------

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def typing(self) -> frozenset[Participant]:
        return frozenset(self._typing)

    @property
    def live(self) -> bool:
        return self._live

    @property
    def status(self) -> Optional[ConversationStatus]:
        if self.state is not ViewState.LOADED:
            return None
        return ConversationStatus.RESOLVED if self._resolved else ConversationStatus.OPEN

    @property
    def is_resolved(self) -> bool:
        return self.status is ConversationStatus.RESOLVED

    @property
    def can_reply(self) -> bool:
        return self.status is ConversationStatus.OPEN and not self._closed

    @property
    def conversation(self) -> Optional[Conversation]:
        if self._meta is None or self.status is None:
            return None
        return self._meta.model_copy(update={"messages": self.messages, "status": self.status})

    # -- lifecycle --------------------------------------------------------

    async def open(self) -> None:
        """Join the live channel first, then fetch the snapshot."""
        if self._channel is not None:
            self._live = self._channel.join(self.chat_id, self.apply)
        await self.load()

    async def load(self) -> None:
        try:
            snapshot = await self._chats.get(self.chat_id)
        except PathyAdminError as e:
            logger.warning("Loading chat %s failed: %s", self.chat_id, e)
            self.error = str(e)
            if self.state is ViewState.LOADING:
                self.state = ViewState.FAILED
            self._notify()
            return
        self._apply_snapshot(snapshot)
        self.error = None
        self.state = ViewState.LOADED
        self._notify()

    async def reload(self) -> None:
        if self.state is ViewState.FAILED:
            self.state = ViewState.LOADING
        await self.load()

    def close(self) -> None:
        """Leave the channel (stop typing, drop listeners)."""
        if self._closed:
            return
        self._closed = True
        self._typing.clear()
        if self._channel is not None:
            self._channel.leave(self.chat_id)
        self._live = False

    # -- live events ------------------------------------------------------

    def apply(self, event: ChatEvent) -> None:
        if self._closed:
            return
        if event.chat_id is not None and event.chat_id != self.chat_id:
            return
        if event.type == S2CEvent.NEW_MESSAGE:
            self._on_message(event)
        elif event.type == S2CEvent.TYPING:
            who = self._participant(event)
            if who is None or who == self._self_participant():
                return
            self._typing.add(who)
        elif event.type == S2CEvent.STOP_TYPING:
            user_id = event.data.get("userId")
            if user_id is None:
                return
            # Matched on id alone; the relay does not always repeat userType here
            self._typing = {who for who in self._typing if who.user_id != str(user_id)}
        elif event.type == S2CEvent.CHAT_RESOLVED:
            self._mark_resolved()
        elif event.type == S2CEvent.ERROR:
            self.error = str(event.data.get("message") or "Chat relay error")
            logger.warning("Relay error on chat %s: %s", self.chat_id, self.error)
        else:
            return
        self._notify()

    def _on_message(self, event: ChatEvent) -> None:
        raw = event.data.get("message")
        if not isinstance(raw, dict):
            return
        try:
            message = Message.model_validate(raw)
        except ModelValidationError as e:
            logger.warning("Dropping malformed message on chat %s: %s", self.chat_id, e.error_count())
            return
        if message.chat_id is not None and message.chat_id != self.chat_id:
            return
        self._forget_typing(message)
        if self._resolved:
            logger.debug("Chat %s is resolved; ignoring late message", self.chat_id)
            return
        if self.state is not ViewState.LOADED:
            if message.key not in {m.key for m in self._pending}:
                self._pending.append(message)
            return
        self._append(message)

    def _participant(self, event: ChatEvent) -> Optional[Participant]:
        user_type = event.data.get("userType")
        user_id = event.data.get("userId")
        if not user_type or user_id is None:
            return None
        return Participant(user_type=str(user_type), user_id=str(user_id))

    def _self_participant(self) -> Optional[Participant]:
        return self._channel.participant if self._channel is not None else None

    def _forget_typing(self, message: Message) -> None:
        for who in list(self._typing):
            if who.user_type != message.sender.value:
                continue
            if message.sender_id is None or who.user_id == message.sender_id:
                self._typing.discard(who)

    # -- state transitions ------------------------------------------------

    def _append(self, message: Message) -> None:
        if message.key in self._keys:
            return
        self._keys.add(message.key)
        self._messages.append(message)

    def _apply_snapshot(self, snapshot: Conversation) -> None:
        # Union of snapshot, what is already shown and what arrived early
        for message in snapshot.messages:
            if message.key not in self._keys:
                self._keys.add(message.key)
                self._messages.append(message)
        for message in self._pending:
            self._append(message)
        self._pending = []
        self._meta = snapshot.model_copy(update={"messages": []})
        if snapshot.status is ConversationStatus.RESOLVED:
            self._resolved = True

    def _mark_resolved(self) -> None:
        if self._resolved:
            return
        self._resolved = True
        self._typing.clear()
        logger.info("Chat %s resolved", self.chat_id)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    # -- operator actions -------------------------------------------------

    async def send(self, text: Optional[str] = None, attachment: Optional[OutgoingAttachment] = None) -> Optional[Message]:
        """Submit a reply. Input problems raise; delivery problems set ``send_error``."""
        if not self.can_reply:
            raise ChatError("This conversation is not open for replies.", code="reply_closed")
        body = check_reply(text, attachment)
        self.send_error = None
        try:
            message = await self._chats.reply(self.chat_id, self._agent_id, body, attachment)
        except PathyAdminError as e:
            logger.warning("Reply to chat %s failed: %s", self.chat_id, e)
            self.send_error = str(e)
            self._notify()
            return None
        if message is not None and not self._resolved:
            self._append(message)
        if not self._live:
            await self.load()
        else:
            self._notify()
        return message

    async def resolve(self) -> bool:
        """Mark the conversation resolved. Irreversible."""
        if self._resolved:
            return True
        if self.state is not ViewState.LOADED:
            raise ChatError("Conversation is not loaded.", code="not_loaded")
        try:
            await self._chats.resolve(self.chat_id)
        except PathyAdminError as e:
            logger.warning("Resolving chat %s failed: %s", self.chat_id, e)
            self.error = str(e)
            self._notify()
            return False
        self._mark_resolved()
        self._notify()
        return True

    def start_typing(self) -> None:
        if self._channel is not None and self.can_reply:
            self._channel.typing(self.chat_id)

    def stop_typing(self) -> None:
        if self._channel is not None:
            self._channel.stop_typing(self.chat_id)
