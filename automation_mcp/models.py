"""Request, response and argument models for the tool server."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolKind(str, Enum):
    """Every operation the server exposes, keyed by its wire name."""

    RUN_TEST = "run_playwright_test"
    GET_RESULTS = "get_test_results"
    LIST_TESTS = "list_test_files"
    GET_CONFIG = "get_test_config"
    GENERATE_REPORT = "generate_allure_report"
    LIST_PAGE_OBJECTS = "get_page_objects"
    ANALYZE_LOGS = "analyze_test_logs"


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")


class ToolRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class TextBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Uniform envelope returned for every call; callers must check ``is_error``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: List[TextBlock]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


# Argument models only check presence and type; values are not interpreted here.


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RunTestArgs(_ToolArgs):
    testType: Literal["all", "smoke", "regression", "specific"] = Field(
        description="Type of test to run"
    )
    testPath: Optional[str] = Field(
        default=None, description="Specific test file path (relative to tests folder)"
    )
    headed: bool = Field(default=False, description="Run tests in headed mode")
    debug: bool = Field(default=False, description="Run tests in debug mode")


class ResultsArgs(_ToolArgs):
    resultType: Literal["allure", "playwright"] = Field(
        default="allure", description="Type of results to retrieve"
    )


class ListTestsArgs(_ToolArgs):
    folder: Optional[str] = Field(
        default=None, description="Specific folder to list (e.g., 'login', 'smoke')"
    )


class ReportArgs(_ToolArgs):
    open: bool = Field(
        default=True, description="Open the report in browser after generation"
    )


class LogsArgs(_ToolArgs):
    limit: int = Field(default=50, ge=0, description="Number of recent log entries to analyze")


class NoArgs(_ToolArgs):
    pass
