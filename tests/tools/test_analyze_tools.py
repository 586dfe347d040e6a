from __future__ import annotations

from pathlib import Path

import pytest

from seclog_analyzer.core.analyzer import CHAT_FAILED_MESSAGE, TOO_LARGE_MESSAGE, AnalyzerError
from seclog_analyzer.core.analyzer import service as analyzer_service
from seclog_analyzer.core.context import CONTEXT_LABEL
from seclog_analyzer.tools.analyze import (
    HARD_LIMIT,
    analyze_logs_impl,
    chat_impl,
    generate_demo_impl,
    log_stats_impl,
)


@pytest.fixture
def gemini_prompts(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    prompts: list[str] = []

    def fake_call(prompt: str, *, cfg) -> str:
        prompts.append(prompt)
        return "## Threat report"

    monkeypatch.setattr(analyzer_service, "_call_gemini", fake_call)
    return prompts


@pytest.fixture
def log_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, write_json_log) -> Path:
    monkeypatch.setenv("SECLOG_BASE_DIR", str(tmp_path))
    path = tmp_path / "auth.json"
    write_json_log(path)
    return path


@pytest.mark.asyncio
async def test_analyze_logs_from_path(log_file: Path, gemini_prompts: list[str]) -> None:
    out = await analyze_logs_impl(log_path=log_file.name)

    assert out == {
        "count": 3,
        "truncated": False,
        "stats": {"total": 3, "failed": 2, "unique_ips": 3, "critical": 1},
        "report": "## Threat report",
    }
    assert gemini_prompts[0] == "Analyze these logs:\n" + log_file.read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_analyze_logs_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_call(prompt: str, *, cfg) -> str:
        raise AnalyzerError("The input token count exceeds the maximum")

    monkeypatch.setattr(analyzer_service, "_call_gemini", fake_call)
    out = await analyze_logs_impl(log_text="some line")

    assert out["report"] is None
    assert out["error"] == TOO_LARGE_MESSAGE
    assert out["count"] == 1


@pytest.mark.asyncio
async def test_exactly_one_source_required(log_file: Path) -> None:
    with pytest.raises(ValueError, match="exactly one"):
        await analyze_logs_impl()
    with pytest.raises(ValueError, match="exactly one"):
        await log_stats_impl(log_text="x", log_path=log_file.name)


@pytest.mark.asyncio
async def test_path_outside_base_dir_rejected(log_file: Path) -> None:
    with pytest.raises(ValueError, match="escapes"):
        await log_stats_impl(log_path="../outside.log")


@pytest.mark.asyncio
async def test_disallowed_suffix_and_missing_file(log_file: Path) -> None:
    (log_file.parent / "auth.exe").write_text("x", encoding="utf-8")
    with pytest.raises(ValueError, match="not allowed"):
        await log_stats_impl(log_path="auth.exe")
    with pytest.raises(FileNotFoundError):
        await log_stats_impl(log_path="nope.log")


@pytest.mark.asyncio
async def test_log_stats(log_file: Path) -> None:
    out = await log_stats_impl(log_path=str(log_file), include_logs=True, limit=2)

    assert out["count"] == 3
    assert out["stats"]["failed"] == 2
    assert out["timeline"] == [
        {"time": "08:12", "count": 2, "failed": 1},
        {"time": "08:13", "count": 1, "failed": 0},
    ]
    assert [r["ip"] for r in out["logs"]] == ["10.0.0.5", "203.0.113.5"]


@pytest.mark.asyncio
async def test_log_stats_ip_filter_and_zone(log_file: Path) -> None:
    out = await log_stats_impl(log_path=log_file.name, ip_filter="203.", tz="Asia/Tokyo")
    assert out["count"] == 1
    assert out["timeline"] == [{"time": "17:12", "count": 1, "failed": 1}]
    assert "logs" not in out


@pytest.mark.asyncio
async def test_log_stats_rejects_bad_input(log_file: Path) -> None:
    with pytest.raises(ValueError, match="limit"):
        await log_stats_impl(log_path=log_file.name, include_logs=True, limit=0)
    with pytest.raises(ValueError, match="time zone"):
        await log_stats_impl(log_path=log_file.name, tz="Mars/Olympus")


def test_generate_demo() -> None:
    first = generate_demo_impl(count=40, seed=7)
    second = generate_demo_impl(count=40, seed=7)

    assert first == second
    assert first["count"] >= 40
    assert first["count"] == len(first["logs"]) == first["stats"]["total"]


def test_generate_demo_limits() -> None:
    with pytest.raises(ValueError):
        generate_demo_impl(count=0)
    assert generate_demo_impl(count=HARD_LIMIT + 500, seed=1)["count"] < HARD_LIMIT + 500


@pytest.mark.asyncio
async def test_chat_with_logs(log_file: Path, gemini_prompts: list[str]) -> None:
    out = await chat_impl(message="Who is brute forcing?", log_path=log_file.name)

    assert out == {"context_records": 3, "reply": "## Threat report"}
    prompt = gemini_prompts[0]
    assert prompt.startswith("Analyze these logs:\n" + CONTEXT_LABEL)
    assert prompt.endswith("\n\nWho is brute forcing?")


@pytest.mark.asyncio
async def test_chat_without_logs(gemini_prompts: list[str]) -> None:
    out = await chat_impl(message="Explain event 4672")
    assert out["context_records"] == 0
    assert gemini_prompts == ["Analyze these logs:\nExplain event 4672"]


@pytest.mark.asyncio
async def test_chat_failure_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_call(prompt: str, *, cfg) -> str:
        raise AnalyzerError("503")

    monkeypatch.setattr(analyzer_service, "_call_gemini", fake_call)
    out = await chat_impl(message="hi")
    assert out == {"context_records": 0, "reply": CHAT_FAILED_MESSAGE, "error": True}

    with pytest.raises(ValueError):
        await chat_impl(message="  ")
