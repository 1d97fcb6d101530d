"""
Chat channel — per-conversation live events over the Socket.IO relay.

Joining registers exactly one listener per conversation; a rejoin replaces it,
so no event is ever delivered twice. With no relay connection the channel is
inert and views fall back to REST-only operation.
"""

import asyncio
import logging
from typing import AsyncGenerator, Callable, Optional

from pathy_admin.models.chat import ChatEvent
from pathy_admin.models.events import C2SEvent, Participant
from pathy_admin.transport.envelope import build_presence, parse_event
from pathy_admin.transport.socketio import SocketIOManager

logger = logging.getLogger(__name__)

ChatListener = Callable[[ChatEvent], None]


class ChatChannel:
    def __init__(self, sio: Optional[SocketIOManager], participant: Participant):
        self._sio = sio
        self._participant = participant
        self._listeners: dict[str, Callable[[], None]] = {}

    @property
    def available(self) -> bool:
        return self._sio is not None and self._sio.connected

    @property
    def participant(self) -> Participant:
        return self._participant

    def joined(self, chat_id: str) -> bool:
        return chat_id in self._listeners

    def _scoped(self, chat_id: str, listener: ChatListener) -> Callable[[str, dict], None]:
        def handler(event: str, raw: dict) -> None:
            evt = parse_event(event, raw)
            if evt is None:
                return
            if evt.chat_id is not None and evt.chat_id != chat_id:
                return  # another conversation
            listener(evt)
        return handler

    def join(self, chat_id: str, listener: ChatListener) -> bool:
        """Observe a conversation. Returns False when running without a relay."""
        if not self.available:
            logger.info("Chat relay unavailable; %s opens without live updates", chat_id)
            return False
        previous = self._listeners.pop(chat_id, None)
        if previous is not None:
            previous()
        self._listeners[chat_id] = self._sio.add_event_handler(self._scoped(chat_id, listener))  # type: ignore[union-attr]
        self._sio.emit(C2SEvent.JOIN_CHAT, build_presence(chat_id, self._participant))  # type: ignore[union-attr]
        return True

    def leave(self, chat_id: str) -> None:
        """Stop typing and detach every listener for the conversation."""
        remove = self._listeners.pop(chat_id, None)
        if remove is not None:
            remove()
        if self.available:
            self._sio.emit(C2SEvent.STOP_TYPING, build_presence(chat_id, self._participant))  # type: ignore[union-attr]

    def leave_all(self) -> None:
        for chat_id in list(self._listeners):
            self.leave(chat_id)

    def typing(self, chat_id: str) -> None:
        if self.available:
            self._sio.emit(C2SEvent.TYPING, build_presence(chat_id, self._participant))  # type: ignore[union-attr]

    def stop_typing(self, chat_id: str) -> None:
        if self.available:
            self._sio.emit(C2SEvent.STOP_TYPING, build_presence(chat_id, self._participant))  # type: ignore[union-attr]

    async def subscribe(self, chat_id: str, poll_interval: float = 5.0) -> AsyncGenerator[ChatEvent, None]:
        """Event stream for a joined conversation. Ends when the relay disconnects."""
        if not self.available:
            return
        queue: asyncio.Queue[ChatEvent] = asyncio.Queue()
        remove = self._sio.add_event_handler(self._scoped(chat_id, queue.put_nowait))  # type: ignore[union-attr]
        try:
            while self.available:
                try:
                    yield await asyncio.wait_for(queue.get(), timeout=poll_interval)
                except asyncio.TimeoutError:
                    continue
        finally:
            remove()
