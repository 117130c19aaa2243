"""Concurrent fetch over several URLs.

Two wait strategies:
    - gather_all: wait for all, fail fast on the first error (all-or-nothing)
    - gather_settled: wait for all, one Ok/Err outcome per URL

Plus ``fetch_joined``, which joins the bodies under a fan-out policy.

Example:
    >>> bodies = await gather_all(urls, fetch_cached)
    >>> outcomes = await gather_settled(urls, fetch_cached)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from devdocs_mcp.foundation.config import FanoutPolicy
from devdocs_mcp.foundation.errors import Err, ErrorTrace, FetchError, Ok, Result, classify_exception

SEPARATOR = "\n\n---\n\n"

FetchFn = Callable[[str], Awaitable[str]]


async def gather_all(urls: Sequence[str], fetch: FetchFn) -> list[str]:
    """Fetch every URL concurrently; bodies come back in URL order.

    The first failure propagates. Requests already issued for the other URLs
    are left to finish on their own and their results are discarded.
    """
    return list(await asyncio.gather(*(fetch(url) for url in urls)))


@dataclass(slots=True, frozen=True)
class Outcome:
    """Per-URL result of a settled fan-out."""

    url: str
    result: Result[str, ErrorTrace]

    @property
    def ok(self) -> bool:
        return self.result.is_ok()


async def gather_settled(urls: Sequence[str], fetch: FetchFn) -> list[Outcome]:
    """Fetch every URL concurrently and collect one outcome per URL (never raises for fetch failures)."""
    raw = await asyncio.gather(*(fetch(url) for url in urls), return_exceptions=True)
    outcomes: list[Outcome] = []
    for url, value in zip(urls, raw):
        if isinstance(value, BaseException):
            if not isinstance(value, Exception):
                raise value
            outcomes.append(Outcome(url, Err(_to_trace(url, value))))
        else:
            outcomes.append(Outcome(url, Ok(value)))
    return outcomes


def _to_trace(url: str, exc: Exception) -> ErrorTrace:
    if isinstance(exc, FetchError):
        return exc.trace
    return ErrorTrace(
        message=str(exc) or type(exc).__name__,
        error_code=classify_exception(exc).value,
    ).with_operation("fetch", url=url)


class FanoutFailed(Exception):
    """Every URL in a partial fan-out failed."""

    def __init__(self, outcomes: list[Outcome]) -> None:
        self.outcomes = outcomes
        first = outcomes[0].result.unwrap_err().message if outcomes else "no URLs"
        super().__init__(first)


def render_partial(outcomes: list[Outcome]) -> str:
    """Join successful bodies, replacing failures with a one-line note."""
    if outcomes and not any(o.ok for o in outcomes):
        raise FanoutFailed(outcomes)
    return SEPARATOR.join(
        o.result.match(ok=lambda body: body, err=lambda t, url=o.url: f"> Failed to fetch {url}: {t.message}")
        for o in outcomes
    )


async def fetch_joined(urls: Sequence[str], fetch: FetchFn, policy: FanoutPolicy = "all_or_nothing") -> str:
    """Fetch ``urls`` concurrently and join the bodies with the separator banner.

    ``all_or_nothing`` raises the first failure; ``partial`` keeps what
    succeeded and raises FanoutFailed only when nothing did.
    """
    if policy == "partial":
        return render_partial(await gather_settled(urls, fetch))
    return SEPARATOR.join(await gather_all(urls, fetch))


__all__ = [
    "SEPARATOR",
    "FanoutFailed",
    "FetchFn",
    "Outcome",
    "fetch_joined",
    "gather_all",
    "gather_settled",
    "render_partial",
]
