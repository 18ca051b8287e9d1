"""Runtime settings for the Playwright automation tool server."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_CAP = 10 * 1024 * 1024
DEFAULT_RESULT_LIMIT = 10


class Settings(BaseModel):
    """Fixed paths and limits shared by the tool handlers."""

    model_config = ConfigDict(frozen=True)

    project_root: Path = DEFAULT_PROJECT_ROOT
    allure_results_dir: Path = Path("reports") / "allure-results"
    playwright_results_dir: Path = Path("test-results")
    tests_dir: Path = Path("tests")
    pages_dir: Path = Path("pages")
    logs_dir: Path = Path("logs")
    run_log_dir: Path = Path("logs") / "mcp"
    config_file: Path = Path("playwright.config.js")

    test_suffixes: tuple[str, ...] = (".spec.js", ".test.js")
    page_suffixes: tuple[str, ...] = (".js",)
    log_suffix: str = ".log"

    result_file_limit: int = Field(default=DEFAULT_RESULT_LIMIT, ge=1)
    output_cap_bytes: int = Field(default=DEFAULT_OUTPUT_CAP, ge=1024)
    command_timeout: Optional[float] = Field(default=None, gt=0)
    log_selection: Literal["name", "mtime"] = "name"
    log_level: str = "INFO"
    run_log_enabled: bool = True

    def resolve(self, relative: Path) -> Path:
        if relative.is_absolute():
            return relative
        return self.project_root / relative

    @property
    def tests_path(self) -> Path:
        return self.resolve(self.tests_dir)

    @property
    def pages_path(self) -> Path:
        return self.resolve(self.pages_dir)

    @property
    def logs_path(self) -> Path:
        return self.resolve(self.logs_dir)

    @property
    def run_log_path(self) -> Path:
        return self.resolve(self.run_log_dir)

    @property
    def config_path(self) -> Path:
        return self.resolve(self.config_file)

    def results_path(self, result_type: str) -> Path:
        if result_type == "allure":
            return self.resolve(self.allure_results_dir)
        return self.resolve(self.playwright_results_dir)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_settings(project_root: Optional[Path] = None, **overrides: object) -> Settings:
    """Build settings from the environment (``.env`` included) plus explicit overrides.

    Explicit arguments win over environment variables. All fixed paths stay
    relative and are resolved against the project root on use.
    """
    load_dotenv()

    values: dict[str, object] = {}
    root = project_root or os.getenv("PLAYWRIGHT_PROJECT_ROOT")
    if root:
        values["project_root"] = Path(root).expanduser().resolve()

    timeout = os.getenv("MCP_COMMAND_TIMEOUT")
    if timeout:
        values["command_timeout"] = timeout

    selection = os.getenv("MCP_LOG_SELECTION")
    if selection:
        values["log_selection"] = selection.strip().lower()

    level = os.getenv("MCP_LOG_LEVEL")
    if level:
        values["log_level"] = level.strip().upper()

    values["run_log_enabled"] = _env_flag("MCP_RUN_LOG", True)
    values.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**values)
