"""Downloadable analysis report."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import aiofiles
from pydantic import BaseModel, Field

from .aggregate import compute_stats
from .models import LogBatch, format_timestamp


class ExportReport(BaseModel):
    timestamp: str = Field(description="When the report was exported (ISO-8601 UTC).")
    analysis: str = Field(description="Markdown report returned by the analyzer.")
    logs_analyzed: int = Field(ge=0, description="Number of records in the analyzed batch.")
    stats: dict[str, int] = Field(description="total, failed, unique_ips and critical counters.")


def build_report(analysis: str, batch: LogBatch, *, now: datetime | None = None) -> ExportReport:
    now = now or datetime.now(UTC)
    return ExportReport(
        timestamp=format_timestamp(now),
        analysis=analysis,
        logs_analyzed=len(batch),
        stats=compute_stats(batch).to_dict(),
    )


def report_filename(now: datetime | None = None) -> str:
    """seclogai_report_YYYYMMDD_HHMM.json, in local time."""
    now = now or datetime.now().astimezone()
    return f"seclogai_report_{now:%Y%m%d_%H%M}.json"


async def write_report(
    report: ExportReport, directory: str | Path, *, now: datetime | None = None
) -> Path:
    """Write the report as pretty JSON under ``directory`` and return its path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / report_filename(now)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(report.model_dump_json(indent=2))
    return path
