"""I/O layer: HTTP fetching and response caching."""
