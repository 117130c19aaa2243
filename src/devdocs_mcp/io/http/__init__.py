"""HTTP fetching."""

from .fetcher import Fetcher

__all__ = ["Fetcher"]
