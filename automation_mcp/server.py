"""MCP stdio server exposing the Playwright project's scripts and artifacts."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp import types as mcp_types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .config import Settings, load_settings
from .dispatcher import Dispatcher
from .handlers import ToolHandlers
from .models import ToolDescriptor, ToolRequest, ToolResponse
from .registry import list_tools
from .run_log import RunLogger
from .tools import CommandRunner

SERVER_NAME = "osmos-playwright-automation"

LOGGER = logging.getLogger("automation_mcp.server")


def to_mcp_tool(descriptor: ToolDescriptor) -> mcp_types.Tool:
    return mcp_types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
    )


def to_call_result(response: ToolResponse) -> mcp_types.CallToolResult:
    return mcp_types.CallToolResult(
        content=[mcp_types.TextContent(type="text", text=block.text) for block in response.content],
        isError=response.is_error,
    )


def build_dispatcher(settings: Settings, run_log: Optional[RunLogger] = None) -> Dispatcher:
    runner = CommandRunner(max_output_bytes=settings.output_cap_bytes, timeout=settings.command_timeout)
    handlers = ToolHandlers(settings, runner)
    return Dispatcher(handlers.as_table(), run_log=run_log)


def create_server(dispatcher: Dispatcher) -> Server:
    """Wire the registry and dispatcher into a low-level MCP server."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def _list_tools() -> List[mcp_types.Tool]:
        return [to_mcp_tool(descriptor) for descriptor in list_tools()]

    # Input validation happens in the dispatcher so failures share one envelope.
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> mcp_types.CallToolResult:
        response = await dispatcher.dispatch(ToolRequest(name=name, arguments=arguments or {}))
        return to_call_result(response)

    return server


async def serve(settings: Settings) -> None:
    run_log: Optional[RunLogger] = None
    if settings.run_log_enabled:
        run_log = RunLogger(settings.run_log_path).open()
    try:
        dispatcher = build_dispatcher(settings, run_log)
        server = create_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            LOGGER.info("%s running on stdio (project root: %s)", SERVER_NAME, settings.project_root)
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        if run_log is not None:
            run_log.close()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Expose a Playwright test project to MCP clients over stdio."
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Root of the Playwright project (default: $PLAYWRIGHT_PROJECT_ROOT or the repository root)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level for stderr diagnostics (default: INFO)",
    )
    parser.add_argument(
        "--no-run-log",
        action="store_true",
        help="Do not append tool calls to the JSON-lines run log.",
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the tool catalogue as JSON and exit.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    overrides: Dict[str, object] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.no_run_log:
        overrides["run_log_enabled"] = False
    settings = load_settings(args.project_root, **overrides)

    # stdout carries the protocol stream.
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    if args.list_tools:
        payload = [descriptor.model_dump(by_alias=True) for descriptor in list_tools()]
        print(json.dumps(payload, indent=2))
        return

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted; shutting down.")


if __name__ == "__main__":
    main()
