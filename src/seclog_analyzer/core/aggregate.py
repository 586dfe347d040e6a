"""Summary statistics and minute-bucketed timeline for a batch.

Two "failed" predicates exist. ``is_failed`` drives the headline
counter and matches the action, an HTTP 403 or Windows event 4625.
``is_timeline_failed`` drives the chart and only looks at the action.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import tzinfo

from .models import LogBatch, LogRecord, Stats, TimelineBucket

FAILED_MARKER = "FAILED"
FAILED_LOGIN_EVENT_ID = 4625
FORBIDDEN_STATUS = 403
CRITICAL_SEVERITIES = frozenset({"High", "Critical"})
MAX_TIMELINE_BUCKETS = 20


def is_failed(record: LogRecord) -> bool:
    """Headline failed-event predicate (counted once per record)."""
    return (
        FAILED_MARKER in record.action
        or record.status_code == FORBIDDEN_STATUS
        or record.event_id == FAILED_LOGIN_EVENT_ID
    )


def is_timeline_failed(record: LogRecord) -> bool:
    """Timeline failed-event predicate (action only)."""
    return FAILED_MARKER in record.action


def is_critical(record: LogRecord) -> bool:
    return record.severity in CRITICAL_SEVERITIES


def compute_stats(batch: Iterable[LogRecord]) -> Stats:
    total = failed = critical = 0
    ips: set[str] = set()
    for r in batch:
        total += 1
        ips.add(r.ip)
        if is_failed(r):
            failed += 1
        if is_critical(r):
            critical += 1
    return Stats(total=total, failed=failed, unique_ips=len(ips), critical=critical)


def time_label(record: LogRecord, *, tz: tzinfo | None = None) -> str:
    """HH:MM label in ``tz`` (local time when None).

    Instants that cannot be shifted into ``tz`` without leaving the datetime
    range keep their UTC label.
    """
    instant = record.instant
    try:
        return instant.astimezone(tz).strftime("%H:%M")
    except OverflowError:
        return instant.strftime("%H:%M")


def compute_timeline(
    batch: Iterable[LogRecord],
    *,
    tz: tzinfo | None = None,
    max_buckets: int = MAX_TIMELINE_BUCKETS,
) -> list[TimelineBucket]:
    """Group by minute label, sort ascending and keep the last ``max_buckets``."""
    totals: Counter[str] = Counter()
    failures: Counter[str] = Counter()
    for r in batch:
        label = time_label(r, tz=tz)
        totals[label] += 1
        if is_timeline_failed(r):
            failures[label] += 1

    labels = sorted(totals)[-max_buckets:] if max_buckets > 0 else []
    return [
        TimelineBucket(time_label=label, total_count=totals[label], failed_count=failures[label])
        for label in labels
    ]


def aggregate(batch: LogBatch, *, tz: tzinfo | None = None) -> tuple[Stats, list[TimelineBucket]]:
    """Stats and timeline for a batch. Pure; the batch is not modified."""
    return compute_stats(batch), compute_timeline(batch, tz=tz)


def filter_by_ip(batch: LogBatch, needle: str) -> LogBatch:
    """Records whose ip contains ``needle``; an empty needle keeps everything."""
    if not needle:
        return batch
    return tuple(r for r in batch if needle in r.ip)
