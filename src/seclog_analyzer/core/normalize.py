"""Ingestion: turn uploaded text into a batch of LogRecords.

Structured input (a JSON object or array) is validated record by record;
anything else, including malformed JSON, is treated as one record per line.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import RAW_ACTION, UNKNOWN_IP, LogBatch, LogRecord, parse_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def _as_text(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        return v
    if isinstance(v, (dict, list)):
        return json.dumps(v)
    return str(v)


def _as_int(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


class _RecordPayload(BaseModel):
    """Lenient view of one structured log object."""

    model_config = ConfigDict(extra="ignore")

    timestamp: str | None = Field(
        default=None, validation_alias=AliasChoices("timestamp", "@timestamp", "time")
    )
    event_id: int | str | None = Field(
        default=None, validation_alias=AliasChoices("event_id", "eventId", "EventID")
    )
    user: str | None = Field(default=None, validation_alias=AliasChoices("user", "username"))
    ip: str | None = Field(default=None, validation_alias=AliasChoices("ip", "source_ip", "src_ip"))
    action: str | None = None
    status_code: int | None = Field(
        default=None, validation_alias=AliasChoices("status_code", "statusCode", "status")
    )
    user_agent: str | None = Field(
        default=None, validation_alias=AliasChoices("user_agent", "userAgent")
    )
    severity: str | None = None
    message: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _valid_instant(cls, v: Any) -> str | None:
        if not isinstance(v, str):
            return None
        try:
            parse_timestamp(v)
        except (ValueError, OverflowError):
            return None
        return v.strip()

    @field_validator("event_id", mode="before")
    @classmethod
    def _event_id(cls, v: Any) -> int | str | None:
        as_int = _as_int(v)
        if as_int is not None:
            return as_int
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @field_validator("status_code", mode="before")
    @classmethod
    def _status_code(cls, v: Any) -> int | None:
        return _as_int(v)

    @field_validator("ip", "action", mode="before")
    @classmethod
    def _required_text(cls, v: Any) -> str | None:
        text = _as_text(v)
        # Blank required fields fall back like missing ones.
        return text if text and text.strip() else None

    @field_validator("user", "user_agent", "severity", "message", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> str | None:
        return _as_text(v)


def _raw_record(message: str, *, now: str) -> LogRecord:
    return LogRecord(timestamp=now, ip=UNKNOWN_IP, action=RAW_ACTION, message=message)


def _record_from_value(value: Any, *, now: str) -> LogRecord:
    """Validate one parsed JSON value against the LogRecord shape."""
    if not isinstance(value, dict):
        message = value if isinstance(value, str) else json.dumps(value)
        return _raw_record(message, now=now)

    try:
        p = _RecordPayload.model_validate(value)
    except ValidationError:
        logger.debug("Record failed validation; keeping it as raw text", exc_info=True)
        return _raw_record(json.dumps(value), now=now)

    return LogRecord(
        timestamp=p.timestamp or now,
        ip=p.ip or UNKNOWN_IP,
        action=p.action or RAW_ACTION,
        event_id=p.event_id,
        user=p.user,
        status_code=p.status_code,
        user_agent=p.user_agent,
        severity=p.severity,
        message=p.message,
    )


def normalize_lines(raw: str, *, now: str | None = None) -> LogBatch:
    """Raw-text mode: one RAW_LOG record per non-blank line."""
    now = now or utc_now_iso()
    return tuple(_raw_record(line, now=now) for line in _LINE_BREAK.split(raw) if line.strip())


def normalize(raw: str, *, now: str | None = None) -> LogBatch:
    """Normalize uploaded text into a LogBatch. Never raises."""
    now = now or utc_now_iso()
    s = raw.strip()
    if not (s.startswith("[") or s.startswith("{")):
        return normalize_lines(raw, now=now)

    try:
        parsed = json.loads(s)
    except (ValueError, RecursionError):
        # JSONDecodeError is a ValueError; so is the int-string digit limit.
        logger.debug("Structured input did not parse as JSON; falling back to raw lines")
        return normalize_lines(raw, now=now)

    items = parsed if isinstance(parsed, list) else [parsed]
    return tuple(_record_from_value(item, now=now) for item in items)
