"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import random
from datetime import UTC, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from seclog_analyzer.core.aggregate import aggregate, compute_stats, filter_by_ip
from seclog_analyzer.core.analyzer import (
    CHAT_FAILED_MESSAGE,
    AnalyzerConfig,
    AnalyzerError,
    analyze,
    describe_failure,
    resolve_analyzer_config,
)
from seclog_analyzer.core.context import build_context
from seclog_analyzer.core.generator import generate
from seclog_analyzer.core.models import LogBatch, TimelineBucket
from seclog_analyzer.core.normalize import normalize
from seclog_analyzer.core.truncate import prepare
from seclog_analyzer.paths import read_log_text

DEFAULT_DEMO_COUNT = 150
HARD_LIMIT = 5000


async def _load_text(log_text: str | None, log_path: str | None) -> str:
    """Return raw log text from exactly one of text or path."""
    if (log_text is None) == (log_path is None):
        raise ValueError("Provide exactly one of log_text or log_path.")
    if log_text is not None:
        return log_text
    return await read_log_text(log_path)


def _parse_tz(tz: str | None) -> tzinfo | None:
    """UTC by default; 'local' for the server's zone; otherwise an IANA name."""
    if tz is None or tz.upper() == "UTC":
        return UTC
    if tz.lower() == "local":
        return None
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown time zone '{tz}'.") from e


def _timeline_to_list(timeline: list[TimelineBucket]) -> list[dict[str, Any]]:
    return [
        {"time": b.time_label, "count": b.total_count, "failed": b.failed_count}
        for b in timeline
    ]


def _records_to_list(records: LogBatch) -> list[dict[str, Any]]:
    return [r.to_dict() for r in records]


async def analyze_logs_impl(
    *,
    log_text: str | None = None,
    log_path: str | None = None,
    cfg: AnalyzerConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `analyze_logs` MCP tool.

    The raw text goes to the analyzer whatever the normalizer made of it;
    the normalized batch only feeds the local counters.
    """
    raw = await _load_text(log_text, log_path)
    batch = normalize(raw)
    out: dict[str, Any] = {
        "count": len(batch),
        "truncated": prepare(raw).was_truncated,
        "stats": compute_stats(batch).to_dict(),
    }
    try:
        out["report"] = await analyze(raw, cfg=cfg)
    except AnalyzerError as e:
        out["report"] = None
        out["error"] = describe_failure(e)
    return out


async def log_stats_impl(
    *,
    log_text: str | None = None,
    log_path: str | None = None,
    ip_filter: str | None = None,
    tz: str | None = None,
    include_logs: bool = False,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `log_stats` MCP tool (no analyzer call)."""
    raw = await _load_text(log_text, log_path)
    batch = filter_by_ip(normalize(raw), ip_filter or "")
    stats, timeline = aggregate(batch, tz=_parse_tz(tz))
    out: dict[str, Any] = {
        "count": len(batch),
        "stats": stats.to_dict(),
        "timeline": _timeline_to_list(timeline),
    }
    if include_logs:
        if limit is None or limit > HARD_LIMIT:
            limit = HARD_LIMIT
        if limit <= 0:
            raise ValueError("limit must be > 0")
        out["logs"] = _records_to_list(batch[:limit])
    return out


def generate_demo_impl(*, count: int | None = None, seed: int | None = None) -> dict[str, Any]:
    """Implementation for the `generate_demo_logs` MCP tool."""
    if count is None:
        count = DEFAULT_DEMO_COUNT
    if count <= 0:
        raise ValueError("count must be > 0")
    if count > HARD_LIMIT:
        count = HARD_LIMIT

    rng = random.Random(seed) if seed is not None else None
    batch = generate(count, rng=rng)
    return {
        "count": len(batch),
        "stats": compute_stats(batch).to_dict(),
        "logs": _records_to_list(batch),
    }


async def chat_impl(
    *,
    message: str,
    log_text: str | None = None,
    log_path: str | None = None,
    cfg: AnalyzerConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `chat_about_logs` MCP tool."""
    if not message.strip():
        raise ValueError("message must not be empty")
    batch: LogBatch = ()
    if log_text is not None or log_path is not None:
        batch = normalize(await _load_text(log_text, log_path))

    cfg = resolve_analyzer_config(cfg)
    prompt = build_context(batch, message, limit=cfg.context_limit)
    out: dict[str, Any] = {"context_records": min(len(batch), cfg.context_limit)}
    try:
        out["reply"] = await analyze(prompt, cfg=cfg)
    except AnalyzerError as e:
        out["reply"] = describe_failure(e, fallback=CHAT_FAILED_MESSAGE)
        out["error"] = True
    return out
