"""Bounded log context for free-form chat questions."""

from __future__ import annotations

import json

from .models import LogBatch

CONTEXT_LIMIT = 50
CONTEXT_LABEL = "Current Logs Context: "


def serialize_records(batch: LogBatch, *, indent: int | None = None) -> str:
    """Serialize records as a JSON array."""
    return json.dumps([r.to_dict() for r in batch], indent=indent)


def build_context(batch: LogBatch, user_message: str, *, limit: int = CONTEXT_LIMIT) -> str:
    """Prefix ``user_message`` with at most ``limit`` records from the batch."""
    if not batch:
        return user_message
    return f"{CONTEXT_LABEL}{serialize_records(batch[:limit])}\n\n{user_message}"
