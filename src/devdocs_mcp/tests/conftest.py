"""Shared fixtures: a scripted fake network, a fixed calendar day, quiet logs."""

from __future__ import annotations

import asyncio
import os
from collections import Counter
from collections.abc import AsyncIterator, Iterator
from datetime import date
from pathlib import Path

import httpx
import pytest

from devdocs_mcp.foundation.config import DevdocsSettings, HttpSettings, clear_settings_cache
from devdocs_mcp.io.cache import MemoryCache
from devdocs_mcp.io.http import Fetcher
from devdocs_mcp.observability import configure_logging
from devdocs_mcp.tools import ToolContext

DAY = date(2025, 6, 3)


class FakeNetwork:
    """URL -> (status, body) table behind an ``httpx.MockTransport``.

    Unknown URLs answer 404. ``delay`` makes a URL hang for that many seconds.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, str]] = {}
        self.delays: dict[str, float] = {}
        self.calls: Counter[str] = Counter()

    def add(self, url: str, body: str = "", status: int = 200) -> FakeNetwork:
        self.routes[url] = (status, body)
        return self

    def delay(self, url: str, seconds: float) -> FakeNetwork:
        self.delays[url] = seconds
        return self

    async def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls[url] += 1
        if seconds := self.delays.get(url):
            await asyncio.sleep(seconds)
        status, body = self.routes.get(url, (404, ""))
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    configure_logging("none")
    yield
    configure_logging("none")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate tests from DEVDOCS_* variables and any .env in the working directory."""
    for name in [k for k in os.environ if k.startswith("DEVDOCS_")]:
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def settings() -> DevdocsSettings:
    return DevdocsSettings()


@pytest.fixture
async def fetcher(network: FakeNetwork) -> AsyncIterator[Fetcher]:
    async with Fetcher(HttpSettings(timeout=1.0), transport=network.transport) as f:
        yield f


@pytest.fixture
def ctx(fetcher: Fetcher) -> ToolContext:
    return ToolContext(fetcher=fetcher, cache=MemoryCache(), clock=lambda: DAY)


@pytest.fixture
def day() -> date:
    return DAY
