"""MCP tool server for a Playwright UI test project."""

__version__ = "1.0.0"
