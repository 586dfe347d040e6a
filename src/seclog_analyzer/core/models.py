"""Core data models for security log analysis."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TypeAlias

UNKNOWN_IP = "Unknown"
RAW_ACTION = "RAW_LOG"

# Serialization order used for prompts, context windows and exports.
_FIELD_ORDER = (
    "timestamp",
    "event_id",
    "user",
    "ip",
    "action",
    "status_code",
    "user_agent",
    "severity",
    "message",
)


def parse_timestamp(s: str) -> datetime:
    """Parse an ISO-8601 timestamp. If tz is missing, assume UTC."""
    dt = datetime.fromisoformat(s.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_timestamp(dt: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision."""
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return format_timestamp(datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One normalized security event.

    ``timestamp``, ``ip`` and ``action`` are always present; the normalizer
    synthesizes them for free-text input.
    """

    timestamp: str
    ip: str
    action: str
    event_id: int | str | None = None
    user: str | None = None
    status_code: int | None = None
    user_agent: str | None = None
    severity: str | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        # Raises ValueError for anything that is not a valid instant.
        parse_timestamp(self.timestamp)

    @property
    def instant(self) -> datetime:
        """Timestamp as an aware UTC datetime."""
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict; unset optional fields are omitted."""
        out: dict[str, Any] = {}
        for name in _FIELD_ORDER:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


LogBatch: TypeAlias = tuple[LogRecord, ...]


@dataclass(frozen=True, slots=True)
class AnalysisRequest:
    """Size-bounded text payload for the external analyzer."""

    payload: str
    was_truncated: bool


@dataclass(frozen=True, slots=True)
class Stats:
    """Summary counters derived from a batch."""

    total: int = 0
    failed: int = 0
    unique_ips: int = 0
    critical: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "failed": self.failed,
            "unique_ips": self.unique_ips,
            "critical": self.critical,
        }


@dataclass(frozen=True, slots=True)
class TimelineBucket:
    """Minute-resolution event counts."""

    time_label: str  # HH:MM
    total_count: int
    failed_count: int
