"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def investigate_logs(log_path: str, ip_filter: str | None = None) -> list[dict[str, Any]]:
        """Build a prompt for a security investigation of a log file."""
        call_lines = [f"- log_path: {log_path}"]
        if ip_filter:
            call_lines.append(f"- ip_filter: {ip_filter}")
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a SOC analyst assistant. Base every statement on tool output. "
                    "Do not invent events; if the evidence is insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Investigate the log file. Follow this workflow:\n"
                    "- Call log_stats first with the parameters below and include_logs=true.\n"
                    "- Then call analyze_logs with the same log_path for the full report.\n"
                    "- If the failed counter is high, look for repeated LOGIN_FAILED records "
                    "from one ip against one user.\n\n"
                    "Call log_stats with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Summary (1-3 bullets)\n"
                    "2) Evidence (2-5 records with timestamp, ip, user and action)\n"
                    "3) Risk (Critical/High/Medium/Low with one sentence why)\n"
                    "4) Next actions (2-4 bullets)\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Optional: raw log contents are available at:"},
                    {"type": "resource", "uri": f"log://{log_path}"},
                ],
            },
        ]
