"""Newline-delimited JSON-RPC over stdio.

Framing is incremental: bytes are buffered until a newline arrives, so one
chunk may carry several messages and one message may span several chunks.
Each request runs as its own task and responses are written as they complete,
one JSON object per line. Stdout carries nothing but responses.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Protocol

import orjson

from devdocs_mcp.foundation.errors import RpcErrorCode
from devdocs_mcp.io.http import Fetcher
from devdocs_mcp.observability import get_logger

from .dispatcher import Dispatcher, Message, failure

CHUNK_SIZE = 64 * 1024

log = get_logger("transport")


class DecodeError(ValueError):
    """A framed line is not a JSON object."""


class Writer(Protocol):
    """The subset of ``asyncio.StreamWriter`` the server writes through."""

    def write(self, data: bytes) -> None: ...
    async def drain(self) -> None: ...


class LineDecoder:
    """Incremental newline framer. Blank lines are dropped."""

    __slots__ = ("_buffer",)

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> list[str]:
        self._buffer.extend(chunk)
        *complete, rest = self._buffer.split(b"\n")
        self._buffer = bytearray(rest)
        return [text for line in complete if (text := _text(line))]

    def flush(self) -> list[str]:
        """Return the unterminated tail, if any, and reset."""
        text = _text(self._buffer)
        self._buffer = bytearray()
        return [text] if text else []

    @property
    def pending(self) -> int:
        return len(self._buffer)


def _text(line: bytes | bytearray) -> str:
    return bytes(line).decode("utf-8", errors="replace").strip()


def decode_message(line: str) -> Message:
    try:
        payload = orjson.loads(line)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Parse error: {e}") from e
    if not isinstance(payload, dict):
        raise DecodeError("Invalid request: expected a JSON object")
    return payload


def encode_message(message: Message) -> bytes:
    return orjson.dumps(message) + b"\n"


class StdioServer:
    """Reads requests from a stream, dispatches them concurrently, writes responses.

    Example:
        >>> server = StdioServer(dispatcher, fetcher)
        >>> await server.serve(reader, writer)  # returns at EOF
    """

    __slots__ = ("_dispatcher", "_fetcher", "_tasks", "_write_lock")

    def __init__(self, dispatcher: Dispatcher, fetcher: Fetcher | None = None) -> None:
        self._dispatcher = dispatcher
        self._fetcher = fetcher
        self._tasks: set[asyncio.Task[None]] = set()
        self._write_lock = asyncio.Lock()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    async def serve(self, reader: asyncio.StreamReader, writer: Writer) -> None:
        decoder = LineDecoder()
        try:
            while chunk := await reader.read(CHUNK_SIZE):
                for line in decoder.feed(chunk):
                    self._spawn(line, writer)
            for line in decoder.flush():
                self._spawn(line, writer)
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
        finally:
            if self._fetcher is not None:
                await self._fetcher.aclose()
        log.info("input closed, server stopped")

    def _spawn(self, line: str, writer: Writer) -> None:
        task = asyncio.create_task(self._process(line, writer))
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and (exc := task.exception()) is not None:
            log.error("request task failed", error=f"{type(exc).__name__}: {exc}")

    async def _process(self, line: str, writer: Writer) -> None:
        try:
            message = decode_message(line)
        except DecodeError as e:
            log.info("undecodable message", error=str(e))
            await self._write(writer, failure(None, RpcErrorCode.INTERNAL_ERROR, str(e)))
            return

        response = await self._dispatcher.handle(message)
        if response is not None:
            await self._write(writer, response)

    async def _write(self, writer: Writer, message: Message) -> None:
        async with self._write_lock:
            try:
                writer.write(encode_message(message))
                await writer.drain()
            except OSError as e:
                log.info("output closed, response dropped", error=str(e))


async def open_stdio() -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Wrap the process's stdin/stdout pipes in asyncio streams."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    transport, protocol = await loop.connect_write_pipe(asyncio.streams.FlowControlMixin, sys.stdout)
    writer = asyncio.StreamWriter(transport, protocol, reader, loop)
    return reader, writer


async def serve_stdio(server: StdioServer) -> None:
    reader, writer = await open_stdio()
    await server.serve(reader, writer)
