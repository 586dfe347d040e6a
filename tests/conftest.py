from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path

import pytest

from seclog_analyzer.core.models import LogRecord


@pytest.fixture
def make_record() -> Callable[..., LogRecord]:
    def _make(**overrides) -> LogRecord:
        fields = {
            "timestamp": "2025-12-30T08:12:01.000Z",
            "ip": "10.0.0.5",
            "action": "LOGIN_SUCCESS",
        }
        fields.update(overrides)
        return LogRecord(**fields)

    return _make


@pytest.fixture
def write_json_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "[\n"
            '  {"timestamp": "2025-12-30T08:12:01Z", "ip": "10.0.0.5", "user": "jdoe",'
            ' "action": "LOGIN_SUCCESS", "event_id": 4624, "severity": "Info"},\n'
            '  {"timestamp": "2025-12-30T08:12:40Z", "ip": "203.0.113.5", "user": "admin",'
            ' "action": "LOGIN_FAILED", "event_id": 4625, "severity": "High"},\n'
            '  {"timestamp": "2025-12-30T08:13:05Z", "ip": "45.33.22.11", "user": "guest",'
            ' "action": "FILE_ACCESS", "status_code": 403, "severity": "Medium"}\n'
            "]\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def recording_analyzer() -> tuple[Callable[[str], Awaitable[str]], list[str]]:
    """Async analyzer stub that records prompts and returns a canned report."""
    prompts: list[str] = []

    async def _analyze(text: str) -> str:
        prompts.append(text)
        return f"## Report {len(prompts)}"

    return _analyze, prompts
