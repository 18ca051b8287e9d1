"""JSON-lines run log written to ``logs/mcp/mcp-YYYY-MM-DD.log``."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, TextIO

LOGGER = logging.getLogger("automation_mcp.run_log")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunLogger:
    """Appends one JSON object per line to a dated log file.

    The logger is constructed explicitly and handed to whatever needs it.
    ``open()`` must be called before logging (or use it as a context
    manager); ``close()`` flushes and releases the file. The file rolls over
    when the UTC date changes, so the newest file also sorts last by name.
    """

    def __init__(
        self,
        logs_dir: Path,
        *,
        prefix: str = "mcp",
        echo: bool = False,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.logs_dir = logs_dir
        self.prefix = prefix
        self.echo = echo
        self._clock = clock
        self._handle: Optional[TextIO] = None
        self._current_path: Optional[Path] = None
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def current_path(self) -> Optional[Path]:
        return self._current_path

    def open(self) -> "RunLogger":
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self._opened = True
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.flush()
            self._handle.close()
        self._handle = None
        self._opened = False

    def __enter__(self) -> "RunLogger":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def path_for(self, moment: datetime) -> Path:
        return self.logs_dir / f"{self.prefix}-{moment.strftime('%Y-%m-%d')}.log"

    def _stream_for(self, moment: datetime) -> TextIO:
        target = self.path_for(moment)
        if self._handle is None or target != self._current_path:
            if self._handle is not None:
                self._handle.close()
            self._handle = target.open("a", encoding="utf-8")
            self._current_path = target
        return self._handle

    def log(self, level: str, message: str, data: Any = None) -> None:
        if not self._opened:
            raise RuntimeError("RunLogger is closed; call open() before logging")
        moment = self._clock()
        entry: dict[str, Any] = {
            "timestamp": moment.isoformat(),
            "level": level,
            "message": message,
        }
        if data:
            entry["data"] = data
        line = json.dumps(entry, default=str)
        stream = self._stream_for(moment)
        stream.write(line + "\n")
        stream.flush()
        if self.echo:
            LOGGER.log(_LEVELS.get(level, logging.INFO), line)

    def info(self, message: str, data: Any = None) -> None:
        self.log("INFO", message, data)

    def warn(self, message: str, data: Any = None) -> None:
        self.log("WARN", message, data)

    def error(self, message: str, data: Any = None) -> None:
        self.log("ERROR", message, data)

    def debug(self, message: str, data: Any = None) -> None:
        self.log("DEBUG", message, data)
