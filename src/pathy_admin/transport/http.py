"""
REST HTTP client for the admin API.

All resource paths are relative to ``{base_url}/api``.
"""

import logging
from typing import Any, Optional

import httpx

from pathy_admin.errors import APIError, ConnectionError

DEFAULT_BASE_URL = "http://localhost:3000"

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api",
            headers={"User-Agent": "pathy-admin/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _auth_headers(self, authenticated: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if authenticated and self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _unwrap(json_data: Any) -> Any:
        """Unwrap ``{"status"|"success": ..., "data": <actual_data>}`` envelopes."""
        if isinstance(json_data, dict) and "data" in json_data and ("status" in json_data or "success" in json_data):
            return json_data["data"]
        return json_data

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error"):
                if isinstance(body.get(key), str):
                    return f"HTTP {resp.status_code}: {body[key]}"
        return f"HTTP {resp.status_code}: {resp.text[:200]}"

    async def _send(self, method: str, path: str, authenticated: bool = True, **kwargs: Any) -> Any:
        headers = self._auth_headers(authenticated)
        try:
            resp = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ConnectionError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            logger.debug("%s %s -> %s", method, path, resp.status_code)
            raise APIError(resp.status_code, self._error_message(resp))
        if not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError:
            logger.warning("%s %s -> %s with a non-JSON body", method, path, resp.status_code)
            raise APIError(resp.status_code, f"HTTP {resp.status_code}: invalid JSON response")
        return self._unwrap(body)

    async def get(self, path: str, params: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        return await self._send("GET", path, authenticated, params=params)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        return await self._send("POST", path, authenticated, json=body)

    async def put(self, path: str, body: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        return await self._send("PUT", path, authenticated, json=body)

    async def delete(self, path: str, params: Optional[dict[str, Any]] = None, authenticated: bool = True) -> Any:
        return await self._send("DELETE", path, authenticated, params=params)

    async def submit_form(
        self,
        path: str,
        fields: dict[str, str],
        files: Optional[dict[str, tuple[str, bytes, str]]] = None,
        method: str = "POST",
    ) -> Any:
        """Form submission. ``files`` maps field -> (filename, content, content_type).

        Sent as ``multipart/form-data`` when ``files`` is given, otherwise as
        ``application/x-www-form-urlencoded``.
        """
        return await self._send(method, path, True, data=fields, files=files or None)

    async def close(self) -> None:
        await self._client.aclose()


def extract_list(result: Any, key: str) -> list[Any]:
    """Pull a record list out of a response shaped ``{key: [...]}``, ``{"data": [...]}`` or ``[...]``."""
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        for candidate in (key, "data"):
            value = result.get(candidate)
            if isinstance(value, list):
                return value
    return []
