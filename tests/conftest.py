"""Shared test fixtures: tokens, a fake relay socket and a canned REST API."""

import time
from typing import Any, Callable, Optional

import httpx
import jwt
import pytest

from pathy_admin.models.events import Participant
from pathy_admin.models.session import AdminSession, Role
from pathy_admin.transport.http import HttpClient

AGENT = Participant(user_type="agent", user_id="agent-1")


def make_token(role: Optional[str] = "admin", email: str = "ops@example.com", expires_in: int = 3600, **claims: Any) -> str:
    payload: dict[str, Any] = {"email": email, "exp": int(time.time()) + expires_in, **claims}
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, "pathy-admin-test-signing-secret-0123456789", algorithm="HS256")


def make_session(role: Role = Role.ADMIN, permissions: Optional[dict[str, Any]] = None) -> AdminSession:
    return AdminSession(
        token=make_token(role.value),
        role=role,
        email="ops@example.com",
        user_id="agent-1",
        permissions=permissions or {},
    )


def make_message(message_id: Optional[str], text: str = "hello", sender: str = "customer", chat_id: str = "c1", **extra: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {"chatId": chat_id, "sender": sender, "text": text, "timestamp": "2024-05-01T10:00:00Z", **extra}
    if message_id is not None:
        raw["_id"] = message_id
    return raw


def make_chat(chat_id: str = "c1", status: str = "open", messages: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
    return {
        "_id": chat_id,
        "customerName": "Asha Rao",
        "customerEmail": "asha@example.com",
        "chatType": "diet_plan",
        "status": status,
        "assignedTo": None,
        "messages": messages or [],
        "createdAt": "2024-05-01T09:00:00Z",
    }


class FakeSocket:
    """Stands in for SocketIOManager: records emits, lets tests fire relay events."""

    def __init__(self, connected: bool = True):
        self.connected = connected
        self.emitted: list[tuple[str, dict[str, Any]]] = []
        self._handlers: list[Callable[[str, dict[str, Any]], None]] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def add_event_handler(self, handler: Callable[[str, dict[str, Any]], None]) -> Callable[[], None]:
        self._handlers.append(handler)

        def remove() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return remove

    def emit(self, event_type: str, data: dict[str, Any]) -> None:
        self.emitted.append((event_type, data))

    def fire(self, event: str, data: dict[str, Any]) -> None:
        for handler in list(self._handlers):
            handler(event, data)

    def events(self, name: str) -> list[dict[str, Any]]:
        return [data for event, data in self.emitted if event == name]


class FakeAPI:
    """Canned REST backend keyed by (method, path without the /api prefix).

    A route value may be a JSON body, an int status code, an httpx.Response,
    an exception to raise, or a callable taking the request.
    """

    def __init__(self, routes: Optional[dict[tuple[str, str], Any]] = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        value = self.routes.get((request.method, path))
        if callable(value):
            value = value(request)
        if value is None:
            return httpx.Response(404, json={"message": f"no route {request.method} {path}"})
        if isinstance(value, Exception):
            raise value
        if isinstance(value, httpx.Response):
            return value
        if isinstance(value, int):
            return httpx.Response(value, json={"message": "server error"})
        return httpx.Response(200, json=value)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def http(self, token: Optional[str] = "test-token") -> HttpClient:
        return HttpClient(base_url="http://admin.test", token=token, transport=self.transport)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == f"/api{path}"]


@pytest.fixture
def socket() -> FakeSocket:
    return FakeSocket()
