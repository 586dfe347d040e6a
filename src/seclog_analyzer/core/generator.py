"""Synthetic security logs for demos.

Produces background authentication/process traffic from small fixed pools and,
now and then, a brute-force burst against the admin account.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

from .models import LogBatch, LogRecord, format_timestamp

IPS = ("192.168.1.10", "10.0.0.5", "203.0.113.5", "45.33.22.11", "172.16.0.44")
USERS = ("admin", "root", "jdoe", "guest", "service_account")
ACTIONS = ("LOGIN_SUCCESS", "LOGIN_FAILED", "FILE_ACCESS", "SUDO_EXEC", "PROCESS_START")

BURST_PROBABILITY = 0.05
BURST_SIZE = 8
FORBIDDEN_PROBABILITY = 0.2
WINDOW = timedelta(hours=1)


def _burst(start: datetime) -> list[LogRecord]:
    return [
        LogRecord(
            timestamp=format_timestamp(start + timedelta(seconds=j)),
            ip=IPS[2],
            user=USERS[0],
            action="LOGIN_FAILED",
            event_id=4625,
            severity="High",
        )
        for j in range(BURST_SIZE)
    ]


def generate(
    count: int = 100,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
    burst_probability: float = BURST_PROBABILITY,
) -> LogBatch:
    """Generate about ``count`` demo records sorted by timestamp.

    A burst consumes BURST_SIZE slots at once, so a burst near the end can
    push the batch past ``count``. Pass a seeded ``rng`` for reproducible output.
    """
    if count < 0:
        raise ValueError("count must be >= 0")
    rng = rng or random.Random()
    now = now or datetime.now(UTC)

    records: list[LogRecord] = []
    slot = 0
    while slot < count:
        ts = now - rng.random() * WINDOW
        if rng.random() < burst_probability:
            records.extend(_burst(ts))
            slot += BURST_SIZE
            continue

        records.append(
            LogRecord(
                timestamp=format_timestamp(ts),
                ip=rng.choice(IPS),
                user=rng.choice(USERS),
                action=rng.choice(ACTIONS),
                event_id=4624 if rng.random() > 0.5 else 4625,
                status_code=403 if rng.random() < FORBIDDEN_PROBABILITY else 200,
                severity="Info",
            )
        )
        slot += 1

    return tuple(sorted(records, key=lambda r: r.instant))
