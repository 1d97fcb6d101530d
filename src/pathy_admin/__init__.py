"""
pathy-admin — back-office SDK for the GSB Pathy admin API.

Socket.IO + REST client: live support chat, dashboard statistics and
record management for users, orders, consultations and daily updates.
"""

from pathy_admin.client import AdminClient, AsyncAdminClient
from pathy_admin.auth import Auth
from pathy_admin.chat import ChatChannel
from pathy_admin.chat_view import ChatView, ViewState
from pathy_admin.session_store import SessionStore
from pathy_admin.errors import (
    PathyAdminError,
    AuthError,
    APIError,
    ConnectionError,
    ValidationError,
    AttachmentError,
    ChatError,
)
from pathy_admin.models.events import C2SEvent, S2CEvent
from pathy_admin.models.session import AdminSession, Feature, Role

__version__ = "0.1.0"
__all__ = [
    "AdminClient",
    "AsyncAdminClient",
    "Auth",
    "ChatChannel",
    "ChatView",
    "ViewState",
    "SessionStore",
    "PathyAdminError",
    "AuthError",
    "APIError",
    "ConnectionError",
    "ValidationError",
    "AttachmentError",
    "ChatError",
    "C2SEvent",
    "S2CEvent",
    "AdminSession",
    "Feature",
    "Role",
]
