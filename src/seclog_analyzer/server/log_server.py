"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (analyze logs, local stats, demo data, chat)
- Resources: addressable data blobs (sample logs, report schema, log files)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m seclog_analyzer.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from seclog_analyzer.prompts.registry import register_prompts
from seclog_analyzer.resources.registry import register_resources
from seclog_analyzer.tools.analyze import (
    analyze_logs_impl,
    chat_impl,
    generate_demo_impl,
    log_stats_impl,
)

LOGGER = logging.getLogger(__name__)
LOG_LEVEL_ENV = "SECLOG_LOG_LEVEL"


def configure_logging() -> None:
    """Configure a reasonable default logging setup.

    Logs go to stderr; stdout must remain clean for the stdio transport.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("seclog-analyzer", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def analyze_logs(log_text: str | None = None, log_path: str | None = None) -> dict[str, Any]:
    """Send security logs to the analyzer and return its Markdown report.

    Parameters
    ----------
    log_text:
        Raw log data (JSON object/array, CSV or free text).
    log_path:
        Path to a log file under SECLOG_BASE_DIR. Use exactly one of log_text/log_path.

    Returns
    -------
    dict:
        {"count": int, "truncated": bool, "stats": dict, "report": str | None}
        plus "error" when the analyzer failed.
    """
    return await analyze_logs_impl(log_text=log_text, log_path=log_path)


@mcp.tool()
async def log_stats(
    log_text: str | None = None,
    log_path: str | None = None,
    ip_filter: str | None = None,
    tz: str | None = None,
    include_logs: bool = False,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return local counters and a per-minute timeline without calling the analyzer.

    Parameters
    ----------
    ip_filter:
        Keep only records whose ip contains this substring.
    tz:
        Zone for timeline labels: "UTC" (default), "local" or an IANA name.
    include_logs:
        Also return the normalized records (capped by limit).
    """
    return await log_stats_impl(
        log_text=log_text,
        log_path=log_path,
        ip_filter=ip_filter,
        tz=tz,
        include_logs=include_logs,
        limit=limit,
    )


@mcp.tool()
def generate_demo_logs(count: int | None = None, seed: int | None = None) -> dict[str, Any]:
    """Generate synthetic security logs including brute-force bursts.

    A seed makes the output reproducible.
    """
    return generate_demo_impl(count=count, seed=seed)


@mcp.tool()
async def chat_about_logs(
    message: str,
    log_text: str | None = None,
    log_path: str | None = None,
) -> dict[str, Any]:
    """Ask a free-form question; the first records of the given logs are sent as context."""
    return await chat_impl(message=message, log_text=log_text, log_path=log_path)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
