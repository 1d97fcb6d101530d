"""
Socket.IO connection manager for the chat relay.

One connection per client, authenticated with the session token in the
connect ``auth`` payload. Every non-system event is fanned out to the
registered handlers; handlers decide which conversation an event belongs to.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import socketio

from pathy_admin.models.events import SYSTEM_EVENTS

SOCKETIO_PATH = "socket.io"

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, dict[str, Any]], None]


class SocketIOManager:
    def __init__(
        self,
        base_url: str,
        token: str,
        transports: Optional[list[str]] = None,
        connect_timeout: float = 15.0,
        socketio_path: str = SOCKETIO_PATH,
    ):
        self._base_url = base_url
        self._token = token
        self._transports = transports or ["websocket", "polling"]
        self._connect_timeout = connect_timeout
        self._socketio_path = socketio_path
        self._sio: Optional[socketio.AsyncClient] = None
        self._connected = False
        self._event_handlers: list[EventHandler] = []

    @property
    def connected(self) -> bool:
        return self._connected and self._sio is not None and self._sio.connected

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Add an event handler. Returns a cleanup function."""
        self._event_handlers.append(handler)

        def remove() -> None:
            try:
                self._event_handlers.remove(handler)
            except ValueError:
                pass
        return remove

    def _dispatch(self, event: str, data: Any) -> None:
        if event in SYSTEM_EVENTS or not isinstance(data, dict):
            return
        for handler in list(self._event_handlers):
            try:
                handler(event, data)
            except Exception:
                logger.exception("Handler failed for %s", event)

    async def connect(self) -> None:
        """Connect to the relay and wait until the handshake completes."""
        if self._sio and self._sio.connected:
            return

        self._sio = socketio.AsyncClient(reconnection=True)
        connected_event = asyncio.Event()

        @self._sio.event
        async def connect() -> None:
            self._connected = True
            connected_event.set()

        @self._sio.on("*")
        async def on_any(event: str, data: Any = None) -> None:
            self._dispatch(event, data)

        @self._sio.event
        async def disconnect(*_args: Any) -> None:
            self._connected = False
            logger.info("Chat relay disconnected")

        await self._sio.connect(
            self._base_url,
            auth={"token": self._token},
            transports=self._transports,
            socketio_path=self._socketio_path,
            wait_timeout=self._connect_timeout,
        )

        try:
            await asyncio.wait_for(connected_event.wait(), timeout=self._connect_timeout)
        except asyncio.TimeoutError:
            await self._sio.disconnect()
            raise TimeoutError(f"Timed out connecting to chat relay after {self._connect_timeout}s")

    def emit(self, event_type: str, data: dict[str, Any]) -> None:
        """Fire-and-forget emit, scheduled on the running event loop. Failures are logged."""
        if not self._sio or not self._sio.connected:
            raise RuntimeError("Socket.IO not connected")
        sio = self._sio

        async def _do_emit() -> None:
            try:
                await sio.emit(event_type, data)
            except Exception as e:
                logger.error("Emit failed for %s: %s", event_type, e)

        try:
            loop = asyncio.get_running_loop()
            loop.create_task(_do_emit())
        except RuntimeError:
            asyncio.ensure_future(_do_emit())

    async def disconnect(self) -> None:
        self._connected = False
        if self._sio:
            await self._sio.disconnect()
            self._sio = None
