"""Outbound payload bounding for the analyzer."""

from __future__ import annotations

import logging

from .models import AnalysisRequest

logger = logging.getLogger(__name__)

# Roughly 125k tokens; well under the model's context window.
MAX_CHARS = 500_000
TRUNCATION_NOTICE = (
    "\n\n[NOTE: Logs were truncated for analysis due to size constraints. "
    "Showing first 500k characters.]"
)


def prepare(raw: str) -> AnalysisRequest:
    """Cut ``raw`` to MAX_CHARS characters and append a notice when it was longer.

    The cut is a plain slice and may land in the middle of a record.
    """
    if len(raw) <= MAX_CHARS:
        return AnalysisRequest(payload=raw, was_truncated=False)

    logger.info("Truncating analyzer payload from %s to %s characters", len(raw), MAX_CHARS)
    return AnalysisRequest(payload=raw[:MAX_CHARS] + TRUNCATION_NOTICE, was_truncated=True)
