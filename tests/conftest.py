from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from automation_mcp.config import Settings
from automation_mcp.dispatcher import Dispatcher
from automation_mcp.handlers import ToolHandlers
from automation_mcp.tools import CommandError, CommandResult


class FakeRunner:
    """Stands in for CommandRunner; records every argv and replays a canned outcome."""

    def __init__(self, stdout: str = "", stderr: str = "", error: Optional[CommandError] = None) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.error = error
        self.calls: List[Tuple[Tuple[str, ...], Path]] = []

    async def run(self, argv: Sequence[str], cwd: Path) -> CommandResult:
        self.calls.append((tuple(argv), cwd))
        if self.error is not None:
            raise self.error
        return CommandResult(argv=tuple(argv), returncode=0, stdout=self.stdout, stderr=self.stderr)


def write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    write(tmp_path / "tests" / "login" / "loginNegativeOperation.spec.js", "test('x', () => {});\n")
    write(tmp_path / "tests" / "login" / "helpers.js", "export {};\n")
    write(tmp_path / "tests" / "smoke" / "home.test.js", "test('y', () => {});\n")
    write(tmp_path / "tests" / "README.md", "# tests\n")
    write(tmp_path / "pages" / "loginPage.js", "export class LoginPage {}\n")
    write(tmp_path / "pages" / "admin" / "usersPage.js", "export class UsersPage {}\n")
    write(tmp_path / "pages" / "notes.txt", "todo\n")
    write(tmp_path / "playwright.config.js", "export default defineConfig({ timeout: 30000 });\n")
    return tmp_path


@pytest.fixture
def settings(project: Path) -> Settings:
    return Settings(project_root=project)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(stdout="3 passed")


@pytest.fixture
def handlers(settings: Settings, runner: FakeRunner) -> ToolHandlers:
    return ToolHandlers(settings, runner)


@pytest.fixture
def dispatcher(handlers: ToolHandlers) -> Dispatcher:
    return Dispatcher(handlers.as_table())
