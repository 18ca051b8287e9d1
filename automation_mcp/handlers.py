"""Tool handlers: one side effect each, summarized as text."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from .config import Settings
from .models import (
    ListTestsArgs,
    LogsArgs,
    NoArgs,
    ReportArgs,
    ResultsArgs,
    RunTestArgs,
    ToolKind,
    ToolResponse,
)
from .tools import CommandError, CommandRunner, filter_suffixes, list_names, read_text, walk_files

LOGGER = logging.getLogger("automation_mcp.handlers")

Handler = Callable[[Mapping[str, Any]], Awaitable[ToolResponse]]


def select_test_command(args: RunTestArgs) -> List[str]:
    """Pick the npm/npx invocation for a test run.

    Priority: debug, smoke, regression, specific with a path, then headed or
    the default run.
    """
    if args.debug:
        return ["npm", "run", "test:debug"]
    if args.testType == "smoke":
        return ["npm", "run", "test:smoke"]
    if args.testType == "regression":
        return ["npm", "run", "test:regression"]
    if args.testType == "specific" and args.testPath:
        return ["npx", "playwright", "test", args.testPath]
    return ["npm", "run", "test:headed" if args.headed else "test"]


def select_report_command(args: ReportArgs) -> List[str]:
    return ["npm", "run", "allure:report" if args.open else "allure:generate"]


def _summarize_result(name: str, data: Dict[str, Any]) -> str:
    lines = [f"📄 {name}"]
    if data.get("name"):
        lines.append(f"   Name: {data['name']}")
    if data.get("status"):
        lines.append(f"   Status: {data['status']}")
    if data.get("stage"):
        lines.append(f"   Stage: {data['stage']}")
    return "\n".join(lines) + "\n"


class ToolHandlers:
    def __init__(self, settings: Settings, runner: CommandRunner) -> None:
        self.settings = settings
        self.runner = runner

    def as_table(self) -> Dict[ToolKind, Handler]:
        return {
            ToolKind.RUN_TEST: self.run_test,
            ToolKind.GET_RESULTS: self.get_results,
            ToolKind.LIST_TESTS: self.list_tests,
            ToolKind.GET_CONFIG: self.get_config,
            ToolKind.GENERATE_REPORT: self.generate_report,
            ToolKind.LIST_PAGE_OBJECTS: self.list_page_objects,
            ToolKind.ANALYZE_LOGS: self.analyze_logs,
        }

    async def run_test(self, arguments: Mapping[str, Any]) -> ToolResponse:
        args = RunTestArgs.model_validate(dict(arguments))
        command = select_test_command(args)
        try:
            result = await self.runner.run(command, self.settings.project_root)
        except CommandError as exc:
            stderr = exc.stderr or str(exc)
            return ToolResponse.error(f"Test execution failed:\n{exc.stdout}\n{stderr}")

        text = f"Test execution completed!\n\nOutput:\n{result.stdout}\n"
        if result.stderr:
            text += f"Errors:\n{result.stderr}"
        return ToolResponse.text(text)

    async def get_results(self, arguments: Mapping[str, Any]) -> ToolResponse:
        args = ResultsArgs.model_validate(dict(arguments))
        results_path = self.settings.results_path(args.resultType)
        try:
            json_files = [name for name in list_names(results_path) if name.endswith(".json")]
        except OSError as exc:
            return ToolResponse.error(f"Error reading test results: {exc}")

        summary = f"Found {len(json_files)} result files in {args.resultType} results:\n\n"
        for name in json_files[: self.settings.result_file_limit]:
            try:
                data = json.loads(read_text(results_path / name))
            except (OSError, ValueError) as exc:
                LOGGER.debug("Skipping unreadable result file %s: %s", name, exc)
                continue
            if not isinstance(data, dict):
                LOGGER.debug("Skipping result file %s: not a JSON object", name)
                continue
            summary += _summarize_result(name, data) + "\n"
        return ToolResponse.text(summary)

    async def list_tests(self, arguments: Mapping[str, Any]) -> ToolResponse:
        args = ListTestsArgs.model_validate(dict(arguments))
        tests_root = self.settings.tests_path
        target = tests_root / args.folder if args.folder else tests_root
        try:
            if not target.resolve().is_relative_to(tests_root.resolve()):
                raise ValueError(f"Folder is outside the tests directory: {args.folder}")
            files = walk_files(target, self.settings.project_root)
        except (OSError, ValueError) as exc:
            return ToolResponse.error(f"Error listing test files: {exc}")

        test_files = filter_suffixes(files, self.settings.test_suffixes)
        listing = "\n".join(f"📁 {path}" for path in test_files)
        return ToolResponse.text(f"Test files found:\n\n{listing}")

    async def get_config(self, arguments: Mapping[str, Any]) -> ToolResponse:
        NoArgs.model_validate(dict(arguments))
        try:
            content = read_text(self.settings.config_path)
        except OSError as exc:
            return ToolResponse.error(f"Error reading config: {exc}")
        return ToolResponse.text(f"Playwright Configuration:\n\n{content}")

    async def generate_report(self, arguments: Mapping[str, Any]) -> ToolResponse:
        args = ReportArgs.model_validate(dict(arguments))
        try:
            result = await self.runner.run(select_report_command(args), self.settings.project_root)
        except CommandError as exc:
            message = f"Error generating Allure report: {exc}"
            if exc.stderr:
                message += f"\n{exc.stderr}"
            return ToolResponse.error(message)
        return ToolResponse.text(f"Allure report generated successfully!\n\n{result.stdout}")

    async def list_page_objects(self, arguments: Mapping[str, Any]) -> ToolResponse:
        NoArgs.model_validate(dict(arguments))
        try:
            files = walk_files(self.settings.pages_path, self.settings.project_root)
        except OSError as exc:
            return ToolResponse.error(f"Error listing page objects: {exc}")

        page_files = filter_suffixes(files, self.settings.page_suffixes)
        listing = "\n".join(f"📄 {path}" for path in page_files)
        return ToolResponse.text(f"Page Object files:\n\n{listing}")

    async def analyze_logs(self, arguments: Mapping[str, Any]) -> ToolResponse:
        args = LogsArgs.model_validate(dict(arguments))
        logs_path = self.settings.logs_path
        try:
            log_files = [name for name in list_names(logs_path) if name.endswith(self.settings.log_suffix)]
            if not log_files:
                return ToolResponse.text("No log files found.")
            recent = self._latest_log(logs_path, log_files)
            lines = read_text(logs_path / recent).splitlines()
        except OSError as exc:
            return ToolResponse.error(f"Error analyzing logs: {exc}")

        tail = lines[-args.limit:] if args.limit > 0 else lines
        body = "\n".join(tail)
        return ToolResponse.text(f"Recent {args.limit} log entries from {recent}:\n\n{body}")

    def _latest_log(self, logs_path: Path, names: List[str]) -> str:
        if self.settings.log_selection == "mtime":
            return max(names, key=lambda name: ((logs_path / name).stat().st_mtime, name))
        return max(names)
