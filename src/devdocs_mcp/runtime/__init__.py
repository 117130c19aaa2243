"""Runtime helpers for concurrent fetching."""

from .fanout import (
    SEPARATOR,
    FanoutFailed,
    Outcome,
    fetch_joined,
    gather_all,
    gather_settled,
    render_partial,
)

__all__ = [
    "SEPARATOR",
    "FanoutFailed",
    "Outcome",
    "fetch_joined",
    "gather_all",
    "gather_settled",
    "render_partial",
]
