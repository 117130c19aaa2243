"""HTTP(S) GET with a fixed deadline and 2xx classification.

One ``httpx.AsyncClient`` serves both schemes. Each fetch:
- rejects anything but http/https before any I/O
- reads the whole body into memory (optionally capped)
- treats 200-299 as success, anything else as ``HTTP <code>: <reason>``
- aborts after the configured total deadline with ``Request timeout``
- never retries

Example:
    >>> async with Fetcher(HttpSettings()) as fetcher:
    ...     body = await fetcher.fetch("https://angular.dev/llms.txt")
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

from devdocs_mcp.foundation.config import HttpSettings
from devdocs_mcp.foundation.errors import ErrorCode, FetchError
from devdocs_mcp.observability import get_logger

if TYPE_CHECKING:
    from types import TracebackType

log = get_logger("fetch")

_SCHEMES = frozenset({"http", "https"})


class Fetcher:
    """Single-shot GET client used by every tool.

    Args:
        settings: HTTP settings (timeout, redirects, size cap, user agent)
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
    """

    __slots__ = ("_settings", "_transport", "_client", "_requests")

    def __init__(self, settings: HttpSettings | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings or HttpSettings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._requests = 0

    @property
    def timeout(self) -> float:
        return self._settings.timeout

    @property
    def request_count(self) -> int:
        """Number of network requests issued (cache hits never count)."""
        return self._requests

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=self._settings.follow_redirects,
                verify=self._settings.verify_ssl,
                timeout=self._settings.timeout,
                headers={"User-Agent": self._settings.user_agent},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Fetcher:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc: BaseException | None,
                        tb: TracebackType | None) -> None:
        await self.aclose()

    async def fetch(self, url: str) -> str:
        """GET ``url`` and return its body as text. Raises FetchError on any failure."""
        scheme = urlparse(url).scheme
        if scheme not in _SCHEMES:
            raise FetchError(f"Unsupported URL scheme '{scheme}'. Use http or https.", ErrorCode.INVALID_PARAMS, url=url)

        self._requests += 1
        try:
            async with asyncio.timeout(self._settings.timeout):
                return await self._get(url)
        except TimeoutError:
            log.info("fetch timed out", url=url, timeout=self._settings.timeout)
            raise FetchError("Request timeout", ErrorCode.TIMEOUT, url=url) from None

    async def _get(self, url: str) -> str:
        limit = int(self._settings.max_response_size) if self._settings.max_response_size else None
        try:
            async with self._get_client().stream("GET", url) as response:
                chunks: list[bytes] = []
                size = 0
                async for chunk in response.aiter_bytes():
                    size += len(chunk)
                    if limit is not None and size > limit:
                        raise FetchError(f"Response exceeded max size ({limit} bytes)", ErrorCode.EXTERNAL_SERVICE_ERROR, url=url)
                    chunks.append(chunk)

                if not response.is_success:
                    log.info("fetch failed", url=url, status=response.status_code)
                    raise FetchError(
                        f"HTTP {response.status_code}: {response.reason_phrase}",
                        ErrorCode.HTTP_STATUS,
                        url=url,
                        status=response.status_code,
                    )
                return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")
        except httpx.TimeoutException:
            log.info("fetch timed out", url=url, timeout=self._settings.timeout)
            raise FetchError("Request timeout", ErrorCode.TIMEOUT, url=url) from None
        except httpx.HTTPError as e:
            log.info("fetch failed", url=url, error=str(e))
            raise FetchError(str(e) or type(e).__name__, ErrorCode.NETWORK_ERROR, url=url) from e
