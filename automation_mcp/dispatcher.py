"""Routes tool calls to handlers and normalizes every failure into a response."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from .handlers import Handler
from .models import ToolKind, ToolRequest, ToolResponse
from .run_log import RunLogger

LOGGER = logging.getLogger("automation_mcp.dispatcher")


class Dispatcher:
    def __init__(self, handlers: Mapping[ToolKind, Handler], run_log: Optional[RunLogger] = None) -> None:
        missing = [kind.value for kind in ToolKind if kind not in handlers]
        if missing:
            raise RuntimeError("No handler registered for: " + ", ".join(missing))
        self._handlers: Dict[ToolKind, Handler] = dict(handlers)
        self._run_log = run_log

    async def dispatch(self, request: ToolRequest) -> ToolResponse:
        """Invoke the handler for ``request.name``; never raises."""
        name = request.name
        try:
            kind = ToolKind(name)
        except ValueError:
            LOGGER.warning("Unknown tool requested: %s", name)
            response = ToolResponse.error(f"Error executing {name}: Unknown tool: {name}")
            self._record(name, response)
            return response

        try:
            response = await self._handlers[kind](request.arguments)
        except Exception as exc:
            LOGGER.exception("Tool %s raised", name)
            response = ToolResponse.error(f"Error executing {name}: {exc}")

        self._record(name, response)
        return response

    def _record(self, name: str, response: ToolResponse) -> None:
        if response.is_error:
            LOGGER.info("Tool %s finished with an error", name)
        else:
            LOGGER.info("Tool %s finished", name)
        if self._run_log is None or not self._run_log.is_open:
            return
        data = {"tool": name, "isError": response.is_error}
        try:
            if response.is_error:
                self._run_log.error(response.first_text.split("\n", 1)[0][:500], data)
            else:
                self._run_log.info(f"Tool {name} completed", data)
        except OSError as exc:
            LOGGER.warning("Could not write run log entry for %s: %s", name, exc)
