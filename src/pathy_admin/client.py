"""
AdminClient / AsyncAdminClient — main SDK clients.

The client owns exactly one session at a time. ``login`` and ``logout``
replace it wholesale (and persist the change when a store is attached);
views read it and never mutate it.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Union

import httpx
from socketio.exceptions import ConnectionError as RelayConnectionError

from pathy_admin import permissions
from pathy_admin.attachments import OutgoingAttachment
from pathy_admin.auth import Auth
from pathy_admin.chat import ChatChannel
from pathy_admin.chat_view import ChatView
from pathy_admin.chats import ChatsAPI
from pathy_admin.consultations import ConsultationsAPI
from pathy_admin.daily_updates import DailyUpdatesAPI
from pathy_admin.dashboard import DashboardAggregator
from pathy_admin.errors import ConnectionError
from pathy_admin.models.chat import Conversation, Message
from pathy_admin.models.dashboard import Dashboard
from pathy_admin.models.events import Participant
from pathy_admin.models.records import Order, UserRecord
from pathy_admin.models.session import AdminSession, Feature
from pathy_admin.orders import OrdersAPI
from pathy_admin.payments import PaymentsAPI
from pathy_admin.session_store import SessionStore
from pathy_admin.teams import TeamsAPI
from pathy_admin.transport.http import DEFAULT_BASE_URL, HttpClient
from pathy_admin.transport.socketio import SocketIOManager
from pathy_admin.users import UsersAPI

AGENT_USER_TYPE = "agent"

logger = logging.getLogger(__name__)


class AsyncAdminClient:
    """Async admin client (primary)."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[AdminSession] = None,
        session_store: Optional[SessionStore] = None,
        socket_url: Optional[str] = None,
        transports: Optional[list[str]] = None,
        connect_timeout: float = 15.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._socket_url = socket_url or base_url
        self._transports = transports
        self._connect_timeout = connect_timeout
        self._session = session
        self._store = session_store

        self.http = HttpClient(base_url=base_url, token=session.token if session else None, transport=http_transport)
        self.auth = Auth(self.http)
        self.chats = ChatsAPI(self.http)
        self.users = UsersAPI(self.http)
        self.orders = OrdersAPI(self.http)
        self.consultations = ConsultationsAPI(self.http)
        self.daily_updates = DailyUpdatesAPI(self.http)
        self.teams = TeamsAPI(self.http)
        self.payments = PaymentsAPI(self.http)
        self.dashboard = DashboardAggregator(self.users, self.payments, self.chats, self.consultations, self.orders)

        self._sio: Optional[SocketIOManager] = None
        self._channel: Optional[ChatChannel] = None

    @classmethod
    async def restore(cls, session_store: Optional[SessionStore] = None, **kwargs: Any) -> "AsyncAdminClient":
        """Build a client from the persisted session; logged out if nothing usable is stored."""
        store = session_store or SessionStore()
        session = store.load()
        client = cls(session=session, session_store=store, **kwargs)
        if session is not None and not session.role.grants_all:
            client._replace_session(await client.auth.refresh_team_member(session))
        return client

    # -- session ----------------------------------------------------------

    @property
    def session(self) -> Optional[AdminSession]:
        return self._session

    @property
    def authenticated(self) -> bool:
        return self._session is not None

    def _replace_session(self, session: Optional[AdminSession]) -> None:
        self._session = session
        self.http.set_token(session.token if session else None)
        if self._store is not None:
            if session is None:
                self._store.clear()
            else:
                self._store.save(session)

    async def login(self, email: str, password: str, team_member: bool = False) -> AdminSession:
        if team_member:
            session = await self.auth.team_login(email, password)
        else:
            session = await self.auth.login(email, password)
        await self.disconnect()
        self._replace_session(session)
        logger.info("Signed in as %s (%s)", session.email, session.role.value)
        return session

    async def logout(self) -> None:
        await self.disconnect()
        self._replace_session(None)

    def resolve_view(self, feature: Union[Feature, str]) -> Union[Feature, str]:
        return permissions.resolve_view(self._session, feature)

    def can_view(self, feature: Union[Feature, str]) -> bool:
        return permissions.can_view(self._session, feature)

    # -- chat -------------------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._sio is not None and self._sio.connected

    def _participant(self) -> Participant:
        agent_id = self._session.agent_id if self._session else "admin"
        return Participant(user_type=AGENT_USER_TYPE, user_id=agent_id)

    @property
    def channel(self) -> ChatChannel:
        """The live channel, or an inert one when not connected."""
        if self._channel is None:
            return ChatChannel(None, self._participant())
        return self._channel

    async def connect(self) -> None:
        if self._session is None:
            raise ConnectionError("Not logged in. Run the login flow first.")
        if self.connected:
            return
        self._sio = SocketIOManager(
            base_url=self._socket_url,
            token=self._session.token,
            transports=self._transports,
            connect_timeout=self._connect_timeout,
        )
        try:
            await self._sio.connect()
        except (RelayConnectionError, TimeoutError) as e:
            self._sio = None
            raise ConnectionError(f"Chat relay connection failed: {e}") from e
        self._channel = ChatChannel(self._sio, self._participant())

    async def disconnect(self) -> None:
        if self._channel is not None:
            self._channel.leave_all()
            self._channel = None
        if self._sio:
            await self._sio.disconnect()
            self._sio = None

    async def open_chat(self, chat_id: str, on_change: Optional[Callable[[ChatView], None]] = None) -> ChatView:
        """Open a conversation view: join live updates (if connected) and load history."""
        view = ChatView(chat_id, self.chats, self.channel, self._participant().user_id, on_change=on_change)
        await view.open()
        return view

    async def load_dashboard(self) -> Dashboard:
        return await self.dashboard.load()

    async def close(self) -> None:
        await self.disconnect()
        await self.http.close()

    async def __aenter__(self) -> "AsyncAdminClient":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.close()


class AdminClient:
    """Sync wrapper around AsyncAdminClient. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = AsyncAdminClient(**kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def session(self) -> Optional[AdminSession]:
        return self._async.session

    def login(self, email: str, password: str, team_member: bool = False) -> AdminSession:
        return self._run(self._async.login(email, password, team_member=team_member))

    def logout(self) -> None:
        self._run(self._async.logout())

    def resolve_view(self, feature: Union[Feature, str]) -> Union[Feature, str]:
        return self._async.resolve_view(feature)

    def load_dashboard(self) -> Dashboard:
        return self._run(self._async.load_dashboard())

    def list_chats(self, limit: int = 20) -> list[Conversation]:
        return self._run(self._async.chats.list(limit=limit))

    def get_chat(self, chat_id: str) -> Conversation:
        return self._run(self._async.chats.get(chat_id))

    def reply(self, chat_id: str, text: Optional[str] = None, attachment: Optional[OutgoingAttachment] = None) -> Optional[Message]:
        agent_id = self._async._participant().user_id
        return self._run(self._async.chats.reply(chat_id, agent_id, text, attachment))

    def resolve(self, chat_id: str) -> Any:
        return self._run(self._async.chats.resolve(chat_id))

    def list_users(self) -> list[UserRecord]:
        return self._run(self._async.users.list_scores())

    def list_orders(self, limit: Optional[int] = None) -> list[Order]:
        return self._run(self._async.orders.list(limit=limit))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
