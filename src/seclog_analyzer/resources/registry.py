"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

import aiofiles
from mcp.server.fastmcp import FastMCP

from seclog_analyzer.core.export import ExportReport
from seclog_analyzer.core.sample import DEFAULT_SAMPLE_PATH
from seclog_analyzer.core.truncate import MAX_CHARS
from seclog_analyzer.paths import ALLOWED_FILE_SUFFIXES, BASE_DIR_ENV, base_dir, read_log_text


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://seclog/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        return (
            "Resources:\n"
            "- app://seclog/help\n"
            "- app://seclog/examples/sample-logs\n"
            "- app://seclog/schemas/export-report\n"
            f"- log://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed})\n"
            f"\nAnalyzer payloads are capped at {MAX_CHARS} characters.\n"
            f"Base directory: {base_dir()}\n"
        )

    @mcp.resource("app://seclog/examples/sample-logs")
    async def sample_logs() -> str:
        """Return the bundled sample security log document."""
        async with aiofiles.open(DEFAULT_SAMPLE_PATH, encoding="utf-8") as f:
            return await f.read()

    @mcp.resource("app://seclog/schemas/export-report")
    def export_report_schema() -> dict[str, Any]:
        """Return the JSON schema for exported reports."""
        return ExportReport.model_json_schema()

    @mcp.resource("log://{path}")
    async def read_log(path: str) -> str:
        """Return the full log contents."""
        return await read_log_text(path)
