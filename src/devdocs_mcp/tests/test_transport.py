"""Tests for newline framing and the stdio serve loop."""

from __future__ import annotations

import asyncio
import io
from typing import TYPE_CHECKING, Any

import orjson
import pytest

from devdocs_mcp.catalog import ANGULAR_SUMMARY_URL
from devdocs_mcp.foundation.config import DevdocsSettings
from devdocs_mcp.io.http import Fetcher
from devdocs_mcp.observability import configure_logging
from devdocs_mcp.registry import ToolRegistry
from devdocs_mcp.server import DecodeError, Dispatcher, LineDecoder, StdioServer, decode_message, encode_message
from devdocs_mcp.tools import ToolContext, builtin_tools

if TYPE_CHECKING:
    from conftest import FakeNetwork


class FakeWriter:
    """Collects written bytes in place of stdout."""

    def __init__(self) -> None:
        self.data = bytearray()

    def write(self, data: bytes) -> None:
        self.data.extend(data)

    async def drain(self) -> None:
        pass

    def messages(self) -> list[dict[str, Any]]:
        return [orjson.loads(line) for line in self.data.splitlines()]


class ClosedWriter(FakeWriter):
    """Stdout whose reading end has gone away."""

    def write(self, data: bytes) -> None:
        raise BrokenPipeError("stdout closed")


def line(msg: dict[str, Any]) -> bytes:
    return orjson.dumps(msg) + b"\n"


@pytest.fixture
def server(ctx: ToolContext, fetcher: Fetcher, settings: DevdocsSettings) -> StdioServer:
    return StdioServer(Dispatcher(ToolRegistry(builtin_tools(ctx)), settings), fetcher)


async def serve_bytes(server: StdioServer, *chunks: bytes, writer: FakeWriter | None = None) -> FakeWriter:
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    reader.feed_eof()
    writer = writer or FakeWriter()
    await server.serve(reader, writer)
    return writer


# ═════════════════════════════════════════════════════════════════════════════
# Framing
# ═════════════════════════════════════════════════════════════════════════════


def test_decoder_combined_chunk() -> None:
    decoder = LineDecoder()
    assert decoder.feed(b'{"a":1}\n{"b":2}\n') == ['{"a":1}', '{"b":2}']
    assert decoder.pending == 0


def test_decoder_split_chunk() -> None:
    decoder = LineDecoder()
    assert decoder.feed(b'{"method":') == []
    assert decoder.feed(b'"ping"}') == []
    assert decoder.feed(b'\n{"id"') == ['{"method":"ping"}']
    assert decoder.pending == len(b'{"id"')


def test_decoder_skips_blank_lines_and_crlf() -> None:
    decoder = LineDecoder()
    assert decoder.feed(b'\n\r\n  \n{"a":1}\r\n') == ['{"a":1}']


def test_decoder_flush_returns_tail() -> None:
    decoder = LineDecoder()
    decoder.feed(b'{"a":1}')
    assert decoder.flush() == ['{"a":1}']
    assert decoder.flush() == []


def test_decoder_multibyte_split() -> None:
    decoder = LineDecoder()
    encoded = '{"q":"héllo"}\n'.encode()
    assert decoder.feed(encoded[:7]) == []
    assert decoder.feed(encoded[7:]) == ['{"q":"héllo"}']


def test_decode_message() -> None:
    assert decode_message('{"id":1,"method":"ping"}') == {"id": 1, "method": "ping"}
    with pytest.raises(DecodeError, match="Parse error"):
        decode_message("{nope")
    with pytest.raises(DecodeError, match="expected a JSON object"):
        decode_message("[1, 2]")


def test_encode_message_is_one_line() -> None:
    encoded = encode_message({"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb"}})
    assert encoded.endswith(b"\n")
    assert encoded.count(b"\n") == 1


# ═════════════════════════════════════════════════════════════════════════════
# Serve loop
# ═════════════════════════════════════════════════════════════════════════════


async def test_serve_combined_requests(server: StdioServer) -> None:
    writer = await serve_bytes(
        server,
        line({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}})
        + line({"jsonrpc": "2.0", "method": "notifications/initialized"})
        + line({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
    )
    responses = {m["id"]: m for m in writer.messages()}
    assert set(responses) == {1, 2}
    assert responses[1]["result"]["serverInfo"]["name"] == "angular-docs-mcp"
    assert len(responses[2]["result"]["tools"]) == 3


async def test_serve_split_request(server: StdioServer) -> None:
    raw = line({"jsonrpc": "2.0", "id": 7, "method": "ping"})
    reader = asyncio.StreamReader()
    writer = FakeWriter()
    serving = asyncio.create_task(server.serve(reader, writer))

    for i in range(0, len(raw), 5):
        reader.feed_data(raw[i:i + 5])
        await asyncio.sleep(0)
    reader.feed_eof()
    await serving

    assert writer.messages() == [{"jsonrpc": "2.0", "id": 7, "result": {}}]


async def test_serve_unterminated_last_message(server: StdioServer) -> None:
    writer = await serve_bytes(server, b'{"jsonrpc":"2.0","id":3,"method":"ping"}')
    assert writer.messages() == [{"jsonrpc": "2.0", "id": 3, "result": {}}]


@pytest.mark.parametrize("payload", [b"this is not json\n", b"[1, 2, 3]\n", b'"just a string"\n'])
async def test_serve_malformed_input(server: StdioServer, payload: bytes) -> None:
    writer = await serve_bytes(server, payload)
    [response] = writer.messages()
    assert response["id"] is None
    assert response["error"]["code"] == -32603


async def test_serve_continues_after_malformed_input(server: StdioServer) -> None:
    writer = await serve_bytes(server, b"garbage\n" + line({"jsonrpc": "2.0", "id": 1, "method": "ping"}))
    codes = sorted(m.get("error", {}).get("code", 0) for m in writer.messages())
    assert codes == [-32603, 0]


async def test_requests_overlap(server: StdioServer, network: FakeNetwork) -> None:
    network.add(ANGULAR_SUMMARY_URL, "SUMMARY").delay(ANGULAR_SUMMARY_URL, 0.1)
    slow = {"jsonrpc": "2.0", "id": "slow", "method": "tools/call",
            "params": {"name": "get_angular_docs", "arguments": {"section": "summary"}}}
    fast = {"jsonrpc": "2.0", "id": "fast", "method": "ping"}

    writer = await serve_bytes(server, line(slow) + line(fast))

    assert [m["id"] for m in writer.messages()] == ["fast", "slow"]


async def test_serve_closes_fetcher(server: StdioServer, fetcher: Fetcher, network: FakeNetwork) -> None:
    network.add(ANGULAR_SUMMARY_URL, "SUMMARY")
    await serve_bytes(server, line({"jsonrpc": "2.0", "id": 1, "method": "tools/call",
                                    "params": {"name": "get_angular_docs", "arguments": {"section": "summary"}}}))
    assert fetcher._client is None


async def test_serve_survives_closed_output(
    server: StdioServer, ctx: ToolContext, fetcher: Fetcher, network: FakeNetwork
) -> None:
    network.add(ANGULAR_SUMMARY_URL, "SUMMARY").delay(ANGULAR_SUMMARY_URL, 0.1)
    slow = {"jsonrpc": "2.0", "id": "slow", "method": "tools/call",
            "params": {"name": "get_angular_docs", "arguments": {"section": "summary"}}}
    fast = {"jsonrpc": "2.0", "id": "fast", "method": "ping"}

    await serve_bytes(server, line(slow) + line(fast), writer=ClosedWriter())

    assert network.calls[ANGULAR_SUMMARY_URL] == 1
    assert ctx.cache.get(ctx.key_for(ANGULAR_SUMMARY_URL)) == "SUMMARY"
    assert fetcher._client is None


async def test_per_request_failures_stay_below_warning(server: StdioServer, network: FakeNetwork) -> None:
    buf = io.StringIO()
    configure_logging("json", "WARNING", output=buf)
    call = {"jsonrpc": "2.0", "id": 1, "method": "tools/call",
            "params": {"name": "get_angular_docs", "arguments": {"section": "summary"}}}

    writer = await serve_bytes(server, b"garbage\n" + line(call))

    assert len(writer.messages()) == 2
    assert "HTTP 404" in str(writer.messages())
    assert buf.getvalue() == ""
