"""
Model Context Protocol (MCP) stdio server exposing the Tether.name tools.
"""
from __future__ import annotations

import functools
import logging
import sys
from typing import Any, Optional

import anyio
import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .tools import ToolResponse, ToolShell

logger = logging.getLogger(__name__)

SERVER_NAME = "tether-name-mcp-server"


class ToolCallError(Exception):
    """Raised inside the MCP handler so the library reports ``isError``."""
    pass


async def run_tool(shell: ToolShell, name: str, arguments: dict[str, Any]) -> ToolResponse:
    """
    Run a tool call in a worker thread.

    Key loading and HTTP are blocking. On cancellation the caller is released
    at once and the abandoned thread finishes (or times out) in the background;
    its result is discarded.
    """
    return await anyio.to_thread.run_sync(
        functools.partial(shell.call_tool, name, arguments),
        abandon_on_cancel=True,
    )


def create_server(shell: Optional[ToolShell] = None) -> Server:
    """
    Build an MCP server whose tools are served by ``shell``.

    Args:
        shell: Tool dispatcher (defaults to one reading ``os.environ``)
    """
    shell = shell or ToolShell()
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=spec.name,
                description=spec.description,
                inputSchema=spec.input_schema,
            )
            for spec in shell.list_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[dict[str, Any]]) -> list[types.TextContent]:
        response = await run_tool(shell, name, arguments or {})
        if response.is_error:
            raise ToolCallError(response.text)
        return [types.TextContent(type="text", text=response.text)]

    return server


async def serve(server: Optional[Server] = None) -> None:
    """Serve over stdin/stdout until the client disconnects."""
    server = server or create_server()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        anyio.run(serve)
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)
