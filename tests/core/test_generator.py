from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

import pytest

from seclog_analyzer.core.generator import ACTIONS, BURST_SIZE, IPS, USERS, generate

NOW = datetime(2025, 12, 31, 12, 0, 0, tzinfo=UTC)


def _burst_records(batch):
    return [r for r in batch if r.severity == "High"]


def test_forced_burst_shape() -> None:
    batch = generate(BURST_SIZE, rng=random.Random(1), now=NOW, burst_probability=1.0)

    assert len(batch) == BURST_SIZE
    assert {r.ip for r in batch} == {IPS[2]}
    assert {r.user for r in batch} == {USERS[0]}
    assert {r.event_id for r in batch} == {4625}
    assert {r.action for r in batch} == {"LOGIN_FAILED"}
    deltas = [b.instant - a.instant for a, b in zip(batch, batch[1:])]
    assert deltas == [timedelta(seconds=1)] * (BURST_SIZE - 1)


def test_burst_consumes_eight_slots() -> None:
    batch = generate(16, rng=random.Random(2), now=NOW, burst_probability=1.0)
    assert len(batch) == 2 * BURST_SIZE


def test_burst_may_overshoot_count() -> None:
    batch = generate(3, rng=random.Random(3), now=NOW, burst_probability=1.0)
    assert len(batch) == BURST_SIZE


def test_no_burst_background_records() -> None:
    batch = generate(200, rng=random.Random(4), now=NOW, burst_probability=0.0)
    assert len(batch) == 200
    for r in batch:
        assert r.ip in IPS
        assert r.user in USERS
        assert r.action in ACTIONS
        assert r.event_id in (4624, 4625)
        assert r.status_code in (200, 403)
        assert r.severity == "Info"
    assert {r.status_code for r in batch} == {200, 403}


def test_timestamps_within_last_hour_and_sorted() -> None:
    batch = generate(150, rng=random.Random(5), now=NOW)
    instants = [r.instant for r in batch]
    assert instants == sorted(instants)
    latest = NOW + timedelta(seconds=BURST_SIZE)
    assert all(NOW - timedelta(hours=1) <= t <= latest for t in instants)


def test_seeded_default_generation_contains_a_burst() -> None:
    found = None
    for seed in range(20):
        batch = generate(150, rng=random.Random(seed), now=NOW)
        if _burst_records(batch):
            found = batch
            break
    assert found is not None

    burst = _burst_records(found)
    assert len(burst) % BURST_SIZE == 0
    assert {(r.ip, r.user, r.event_id) for r in burst} == {(IPS[2], USERS[0], 4625)}


def test_same_seed_same_output() -> None:
    a = generate(150, rng=random.Random(42), now=NOW)
    b = generate(150, rng=random.Random(42), now=NOW)
    assert a == b


def test_negative_count_rejected() -> None:
    with pytest.raises(ValueError):
        generate(-1)


def test_zero_count_is_empty() -> None:
    assert generate(0) == ()
