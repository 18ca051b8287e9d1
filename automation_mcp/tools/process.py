from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

LOGGER = logging.getLogger("automation_mcp.process")

_TRUNCATION_MARKER = "\n... (output truncated)"


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: Optional[int]
    stdout: str
    stderr: str


class CommandError(RuntimeError):
    """A command could not be started, timed out, or exited non-zero.

    Carries the captured output so callers can report it the same way as a
    successful run.
    """

    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str] = (),
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = tuple(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


_CHUNK_SIZE = 64 * 1024


async def read_capped(stream: Optional[asyncio.StreamReader], limit: int) -> tuple[bytes, bool]:
    """Read a stream to EOF, keeping at most ``limit`` bytes.

    Data past the cap is drained and discarded so the child never blocks on a
    full pipe. Returns the kept bytes and whether anything was dropped.
    """
    if stream is None:
        return b"", False
    kept = bytearray()
    truncated = False
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        room = limit - len(kept)
        if room > 0:
            kept.extend(chunk[:room])
        if len(chunk) > room:
            truncated = True
    return bytes(kept), truncated


def _decode(raw: bytes, truncated: bool) -> str:
    if not truncated:
        return raw.decode("utf-8", errors="replace")
    return raw.decode("utf-8", errors="ignore") + _TRUNCATION_MARKER


class CommandRunner:
    """Runs one program per call from an argument vector, never through a shell."""

    def __init__(self, max_output_bytes: int = 10 * 1024 * 1024, timeout: Optional[float] = None) -> None:
        self.max_output_bytes = max_output_bytes
        self.timeout = timeout

    async def _collect(self, process: asyncio.subprocess.Process) -> tuple[tuple[bytes, bool], tuple[bytes, bool]]:
        out, err = await asyncio.gather(
            read_capped(process.stdout, self.max_output_bytes),
            read_capped(process.stderr, self.max_output_bytes),
        )
        await process.wait()
        return out, err

    async def run(self, argv: Sequence[str], cwd: Path) -> CommandResult:
        command = tuple(argv)
        display = " ".join(command)
        LOGGER.info("Running %s in %s", display, cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandError(
                f"Command failed to start: {display}: {exc}",
                argv=command,
                stderr=str(exc),
            ) from exc

        try:
            (raw_out, out_cut), (raw_err, err_cut) = await asyncio.wait_for(
                self._collect(process), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            raise CommandError(
                f"Command timed out after {self.timeout} seconds: {display}",
                argv=command,
                returncode=process.returncode,
            ) from exc

        if out_cut or err_cut:
            LOGGER.warning("Output of %s exceeded %s bytes and was truncated", display, self.max_output_bytes)
        stdout = _decode(raw_out, out_cut)
        stderr = _decode(raw_err, err_cut)
        if process.returncode != 0:
            LOGGER.warning("Command %s exited with code %s", display, process.returncode)
            raise CommandError(
                f"Command failed with exit code {process.returncode}: {display}",
                argv=command,
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr,
            )
        return CommandResult(argv=command, returncode=process.returncode, stdout=stdout, stderr=stderr)
