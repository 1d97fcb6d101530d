"""
Durable session storage.

The whole session is written as one JSON document and replaced atomically on
every save. A record that cannot be restored (missing or unreadable file, or
a token that is not an unexpired JWT) reads back as "logged out".
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import jwt
from pydantic import ValidationError

from pathy_admin.models.session import AdminSession

CONFIG_DIR = Path.home() / ".pathy-admin"
SESSION_FILE = CONFIG_DIR / "session.json"

logger = logging.getLogger(__name__)


def decode_token(token: str) -> dict[str, Any]:
    """Read token claims. Signatures are the server's concern; expiry is checked here."""
    return jwt.decode(
        token,
        options={"verify_signature": False, "verify_exp": True},
        algorithms=["HS256", "RS256"],
    )


def token_claims(token: Optional[str]) -> Optional[dict[str, Any]]:
    if not token:
        return None
    try:
        return decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.info("Discarding stored token: %s", e)
        return None


class SessionStore:
    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else SESSION_FILE

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[AdminSession]:
        try:
            raw = json.loads(self._path.read_text())
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unreadable session file %s: %s", self._path, e)
            return None
        if not isinstance(raw, dict) or token_claims(raw.get("token")) is None:
            return None
        try:
            return AdminSession.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid session record in %s: %s", self._path, e.error_count())
            return None

    def save(self, session: AdminSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(session.model_dump(mode="json"), indent=2))
        os.replace(tmp, self._path)

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
