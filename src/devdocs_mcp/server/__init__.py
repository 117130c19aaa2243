"""JSON-RPC dispatch and the stdio transport."""

from .app import build_context, build_server
from .dispatcher import PROTOCOL_VERSION, Dispatcher
from .transport import DecodeError, LineDecoder, StdioServer, decode_message, encode_message, serve_stdio

__all__ = [
    "PROTOCOL_VERSION",
    "DecodeError",
    "Dispatcher",
    "LineDecoder",
    "StdioServer",
    "build_context",
    "build_server",
    "decode_message",
    "encode_message",
    "serve_stdio",
]
