"""Dispatcher routing and error normalization."""

import json
from datetime import datetime, timezone

import pytest

from automation_mcp.dispatcher import Dispatcher
from automation_mcp.handlers import ToolHandlers
from automation_mcp.models import ToolKind, ToolRequest, ToolResponse
from automation_mcp.run_log import RunLogger
from automation_mcp.tools import CommandError

from tests.conftest import FakeRunner


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["nonexistent_tool", "", "RUN_PLAYWRIGHT_TEST", "run_test"])
async def test_unknown_tool_returns_error(dispatcher, name):
    response = await dispatcher.dispatch(ToolRequest(name=name))
    assert response.is_error
    assert response.first_text == f"Error executing {name}: Unknown tool: {name}"


@pytest.mark.asyncio
async def test_routes_smoke_run(dispatcher, runner, project):
    response = await dispatcher.dispatch(
        ToolRequest(name="run_playwright_test", arguments={"testType": "smoke"})
    )
    assert not response.is_error
    assert runner.calls == [(("npm", "run", "test:smoke"), project)]
    assert "3 passed" in response.first_text


@pytest.mark.asyncio
async def test_routes_list_test_files(dispatcher):
    response = await dispatcher.dispatch(
        ToolRequest(name="list_test_files", arguments={"folder": "login"})
    )
    assert "tests/login/loginNegativeOperation.spec.js" in response.first_text


@pytest.mark.asyncio
async def test_missing_config_is_reported(dispatcher, project):
    (project / "playwright.config.js").unlink()
    response = await dispatcher.dispatch(ToolRequest(name="get_test_config"))
    assert response.is_error
    assert response.first_text.startswith("Error reading config: ")


@pytest.mark.asyncio
async def test_malformed_arguments_are_normalized(dispatcher, runner):
    response = await dispatcher.dispatch(
        ToolRequest(name="run_playwright_test", arguments={"testType": "nightly"})
    )
    assert response.is_error
    assert response.first_text.startswith("Error executing run_playwright_test: ")
    assert "testType" in response.first_text
    assert runner.calls == []


@pytest.mark.asyncio
async def test_unexpected_handler_failure_is_caught(handlers):
    async def explode(arguments):
        raise KeyError("disk vanished")

    table = handlers.as_table()
    table[ToolKind.GET_RESULTS] = explode
    dispatcher = Dispatcher(table)

    response = await dispatcher.dispatch(ToolRequest(name="get_test_results"))

    assert response.is_error
    assert response.first_text == "Error executing get_test_results: 'disk vanished'"


def test_every_tool_needs_a_handler(handlers):
    table = handlers.as_table()
    del table[ToolKind.ANALYZE_LOGS]
    with pytest.raises(RuntimeError, match="analyze_test_logs"):
        Dispatcher(table)


@pytest.mark.asyncio
async def test_calls_are_written_to_run_log(handlers, tmp_path):
    with RunLogger(tmp_path / "run-logs") as run_log:
        dispatcher = Dispatcher(handlers.as_table(), run_log=run_log)
        await dispatcher.dispatch(ToolRequest(name="get_page_objects"))
        await dispatcher.dispatch(ToolRequest(name="bogus"))
        log_path = run_log.current_path

    entries = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [entry["level"] for entry in entries] == ["INFO", "ERROR"]
    assert entries[0]["data"] == {"tool": "get_page_objects", "isError": False}
    assert entries[1]["message"] == "Error executing bogus: Unknown tool: bogus"


@pytest.mark.asyncio
async def test_closed_run_log_is_ignored(handlers, tmp_path):
    run_log = RunLogger(tmp_path / "run-logs")
    dispatcher = Dispatcher(handlers.as_table(), run_log=run_log)
    response = await dispatcher.dispatch(ToolRequest(name="get_test_config"))
    assert isinstance(response, ToolResponse)
    assert not response.is_error


@pytest.mark.asyncio
async def test_run_log_stays_out_of_analyzed_logs(handlers, settings, project):
    suite_lines = [f"suite line {index}" for index in range(1, 6)]
    suite_log = project / "logs" / f"test-{datetime.now(timezone.utc):%Y-%m-%d}.log"
    suite_log.parent.mkdir(parents=True, exist_ok=True)
    suite_log.write_text("\n".join(suite_lines) + "\n", encoding="utf-8")

    with RunLogger(settings.run_log_path) as run_log:
        dispatcher = Dispatcher(handlers.as_table(), run_log=run_log)
        for _ in range(3):
            await dispatcher.dispatch(ToolRequest(name="get_page_objects"))
        response = await dispatcher.dispatch(
            ToolRequest(name="analyze_test_logs", arguments={"limit": 5})
        )

    assert not response.is_error
    header, body = response.first_text.split("\n\n", 1)
    assert header == f"Recent 5 log entries from {suite_log.name}:"
    assert body.split("\n") == suite_lines
    assert run_log.current_path.parent == project / "logs" / "mcp"


@pytest.mark.asyncio
async def test_run_log_records_only_first_line_of_failures(settings, tmp_path):
    error = CommandError("exit code 1", stdout="x" * 10_000, stderr="boom")
    handlers = ToolHandlers(settings, FakeRunner(error=error))

    with RunLogger(tmp_path / "run-logs") as run_log:
        dispatcher = Dispatcher(handlers.as_table(), run_log=run_log)
        await dispatcher.dispatch(ToolRequest(name="run_playwright_test", arguments={"testType": "all"}))
        log_path = run_log.current_path

    entry = json.loads(log_path.read_text(encoding="utf-8"))
    assert entry["message"] == "Test execution failed:"
    assert "x" * 100 not in log_path.read_text(encoding="utf-8")
