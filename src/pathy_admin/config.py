"""
Console configuration — ``~/.pathy-admin/config.json``.

Only connection settings live here; credentials are kept by the session
store next to it.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from pathy_admin.session_store import CONFIG_DIR
from pathy_admin.transport.http import DEFAULT_BASE_URL

CONFIG_FILE = CONFIG_DIR / "config.json"
BASE_URL_ENV = "PATHY_ADMIN_BASE_URL"


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    try:
        return json.loads((path or CONFIG_FILE).read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    target = path or CONFIG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(cfg, indent=2))


def resolve_base_url(cfg: dict[str, Any], override: Optional[str] = None) -> str:
    """Explicit value, then environment, then config file, then the default."""
    return override or os.environ.get(BASE_URL_ENV) or cfg.get("base_url") or DEFAULT_BASE_URL
