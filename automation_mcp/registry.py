"""Static catalogue of the tools the server advertises."""

from __future__ import annotations

from typing import List

from .models import ToolDescriptor, ToolKind

_TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ToolKind.RUN_TEST.value,
        description="Run Playwright tests with various options (smoke, regression, debug, headed mode)",
        inputSchema={
            "type": "object",
            "properties": {
                "testType": {
                    "type": "string",
                    "enum": ["all", "smoke", "regression", "specific"],
                    "description": "Type of test to run",
                },
                "testPath": {
                    "type": "string",
                    "description": "Specific test file path (relative to tests folder)",
                },
                "headed": {
                    "type": "boolean",
                    "description": "Run tests in headed mode",
                    "default": False,
                },
                "debug": {
                    "type": "boolean",
                    "description": "Run tests in debug mode",
                    "default": False,
                },
            },
            "required": ["testType"],
        },
    ),
    ToolDescriptor(
        name=ToolKind.GET_RESULTS.value,
        description="Get the latest test execution results from allure-results or test-results",
        inputSchema={
            "type": "object",
            "properties": {
                "resultType": {
                    "type": "string",
                    "enum": ["allure", "playwright"],
                    "description": "Type of results to retrieve",
                    "default": "allure",
                },
            },
        },
    ),
    ToolDescriptor(
        name=ToolKind.LIST_TESTS.value,
        description="List all test files in the project",
        inputSchema={
            "type": "object",
            "properties": {
                "folder": {
                    "type": "string",
                    "description": "Specific folder to list (e.g., 'login', 'smoke')",
                },
            },
        },
    ),
    ToolDescriptor(
        name=ToolKind.GET_CONFIG.value,
        description="Get Playwright configuration details",
        inputSchema={"type": "object", "properties": {}},
    ),
    ToolDescriptor(
        name=ToolKind.GENERATE_REPORT.value,
        description="Generate and view Allure test report",
        inputSchema={
            "type": "object",
            "properties": {
                "open": {
                    "type": "boolean",
                    "description": "Open the report in browser after generation",
                    "default": True,
                },
            },
        },
    ),
    ToolDescriptor(
        name=ToolKind.LIST_PAGE_OBJECTS.value,
        description="List all page object files",
        inputSchema={"type": "object", "properties": {}},
    ),
    ToolDescriptor(
        name=ToolKind.ANALYZE_LOGS.value,
        description="Analyze test execution logs for errors and failures",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": "Number of recent log entries to analyze",
                    "minimum": 0,
                    "default": 50,
                },
            },
        },
    ),
)


def list_tools() -> List[ToolDescriptor]:
    """Return the tool descriptors in a stable order."""
    return list(_TOOLS)
