from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from seclog_analyzer.core.export import ExportReport, build_report, report_filename, write_report

NOW = datetime(2025, 12, 31, 9, 5, 30, tzinfo=UTC)


def test_build_report(make_record) -> None:
    batch = (
        make_record(action="LOGIN_FAILED", severity="Critical"),
        make_record(ip="10.0.0.6"),
    )
    report = build_report("## Findings", batch, now=NOW)
    assert report == ExportReport(
        timestamp="2025-12-31T09:05:30.000Z",
        analysis="## Findings",
        logs_analyzed=2,
        stats={"total": 2, "failed": 1, "unique_ips": 2, "critical": 1},
    )


def test_report_filename() -> None:
    assert report_filename(NOW) == "seclogai_report_20251231_0905.json"


@pytest.mark.asyncio
async def test_write_report(tmp_path: Path, make_record) -> None:
    report = build_report("## Findings", (make_record(),), now=NOW)
    out_dir = tmp_path / "reports"

    path = await write_report(report, out_dir, now=NOW)

    assert path == out_dir / "seclogai_report_20251231_0905.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data) == ["timestamp", "analysis", "logs_analyzed", "stats"]
    assert data["logs_analyzed"] == 1
    assert data["stats"]["unique_ips"] == 1
