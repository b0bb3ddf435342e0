"""Remote store integration.

The store exposes resource-scoped endpoints (``/bills``, ...).  Callers only
depend on :class:`StoreClient`; the application installs the concrete client
during start-up through :func:`configure_store_client`.
"""
from __future__ import annotations

from typing import Any, Protocol
from urllib.parse import urlparse

import httpx

from billed.core.logging import get_logger
from billed.domain import MultipartPayload

logger = get_logger(__name__)


class StoreError(RuntimeError):
    """Raised when the remote store rejects a call or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreResource(Protocol):
    """Operations available on a single store resource."""

    async def create(self, payload: MultipartPayload) -> dict[str, Any]:
        """Upload ``payload`` and return the created entity."""

    async def update(self, data: dict[str, Any], *, selector: str | None = None) -> dict[str, Any]:
        """Persist ``data`` on the entity identified by ``selector``."""


class StoreClient(Protocol):
    """Contract for remote store integrations."""

    def resource(self, name: str) -> StoreResource:
        """Return the API scoped to the ``name`` resource."""


class HttpResource:
    """A resource served by :class:`HttpStoreClient`."""

    def __init__(self, client: "HttpStoreClient", name: str) -> None:
        self._client = client
        self._name = name.strip("/")

    @property
    def name(self) -> str:
        return self._name

    async def create(self, payload: MultipartPayload) -> dict[str, Any]:
        files = {
            field: (item.name, item.content, item.content_type or "application/octet-stream")
            for field, item in payload.files.items()
        }
        return await self._client.send("POST", f"/{self._name}", data=dict(payload.fields), files=files)

    async def update(self, data: dict[str, Any], *, selector: str | None = None) -> dict[str, Any]:
        if not selector:
            raise StoreError(f"cannot update {self._name}: missing identifier")
        return await self._client.send("PATCH", f"/{self._name}/{selector}", json=data)


class HttpStoreClient:
    """Client for the store's JSON/multipart HTTP API."""

    def __init__(
        self,
        api_base: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_base = api_base.rstrip("/")
        self._token = token
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._api_base}{path}"
        try:
            response = await self._client.request(method, url, headers=self._headers(), **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise StoreError(f"{method} {path} failed with status {status}", status_code=status) from exc
        except httpx.RequestError as exc:
            raise StoreError(f"{method} {path} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise StoreError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise StoreError(f"{method} {path} returned a non-object body")
        return body

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def resource(self, name: str) -> HttpResource:
        return HttpResource(self, name)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


_client: StoreClient | None = None


def configure_store_client(client: StoreClient | None) -> None:
    """Install the store client used by new form sessions."""

    global _client
    _client = client


def get_store_client() -> StoreClient:
    """Return the configured store client, falling back to the in-memory store."""

    global _client
    if _client is None:
        from billed.infrastructure.memory_store import InMemoryStore

        _client = InMemoryStore()
    return _client


__all__ = [
    "HttpResource",
    "HttpStoreClient",
    "StoreClient",
    "StoreError",
    "StoreResource",
    "configure_store_client",
    "get_store_client",
]
