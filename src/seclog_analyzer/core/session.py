"""Interactive analysis session.

``AnalysisSession`` owns the current batch, the chat transcript and the last
report. State is an immutable ``SessionState`` that is swapped wholesale;
normalization and aggregation never see it. Every analyzer request gets a
token and only the response to the newest request is kept.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo
from functools import partial
from pathlib import Path
from typing import Literal

from .aggregate import compute_stats, compute_timeline, filter_by_ip
from .analyzer import (
    ANALYSIS_FAILED_MESSAGE,
    CHAT_FAILED_MESSAGE,
    SINGLE_EVENT_FAILED_MESSAGE,
    AnalyzerConfig,
    AnalyzerError,
    analyze,
    build_single_event_text,
    describe_failure,
    resolve_analyzer_config,
)
from .context import build_context, serialize_records
from .export import ExportReport, build_report
from .generator import generate
from .models import LogBatch, Stats, TimelineBucket
from .normalize import normalize
from .sample import DEFAULT_SAMPLE_PATH, SAMPLE_FAILED_MESSAGE, SampleLoadError
from .sample import load_sample as read_sample

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], Awaitable[str]]

WELCOME_MESSAGE = (
    "Welcome to SecLogAI SOC Monitor. Upload logs (JSON/CSV/text), describe an event, "
    "or say 'demo' for simulation."
)
CHAT_CLEARED_MESSAGE = "Chat cleared. How can I help with your logs?"
DEMO_REQUEST_MESSAGE = "Run demo simulation"
DEMO_KEYWORD = "demo"
DEMO_COUNT = 150


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True, slots=True)
class SessionState:
    batch: LogBatch = ()
    messages: tuple[ChatMessage, ...] = field(
        default_factory=lambda: (ChatMessage("assistant", WELCOME_MESSAGE),)
    )
    analysis_output: str = ""


class AnalysisSession:
    """Single-user controller for uploads, demos, chat and exports."""

    def __init__(
        self,
        *,
        analyzer: Analyzer | None = None,
        cfg: AnalyzerConfig | None = None,
        rng: random.Random | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._cfg = resolve_analyzer_config(cfg)
        self._analyzer = analyzer or partial(analyze, cfg=self._cfg)
        self._rng = rng
        self._tz = tz
        self._state = SessionState()
        self._latest_request = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def batch(self) -> LogBatch:
        return self._state.batch

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._state.messages

    def _append(self, role: Literal["user", "assistant"], content: str) -> None:
        self._state = replace(
            self._state, messages=self._state.messages + (ChatMessage(role, content),)
        )

    def _set_batch(self, batch: LogBatch) -> None:
        self._state = replace(self._state, batch=batch)

    async def _run_analysis(
        self, text: str, *, failure_message: str, keep_report: bool
    ) -> str | None:
        """Send ``text`` to the analyzer and post the outcome to the transcript.

        Returns the assistant message, or None when a newer request superseded this one.
        """
        self._latest_request += 1
        token = self._latest_request

        ok = True
        try:
            content = await self._analyzer(text)
        except AnalyzerError as e:
            logger.warning("Analysis request %s failed: %s", token, e)
            content = describe_failure(e, fallback=failure_message)
            ok = False

        if token != self._latest_request:
            logger.debug(
                "Discarding response to request %s (latest is %s)", token, self._latest_request
            )
            return None

        self._append("assistant", content)
        if ok and keep_report:
            self._state = replace(self._state, analysis_output=content)
        return content

    async def ingest(self, raw: str) -> str | None:
        """Replace the batch with uploaded text and analyze the raw text."""
        self._set_batch(normalize(raw))
        return await self._run_analysis(
            raw, failure_message=ANALYSIS_FAILED_MESSAGE, keep_report=True
        )

    async def run_demo(self, count: int = DEMO_COUNT) -> str | None:
        batch = generate(count, rng=self._rng)
        self._set_batch(batch)
        self._append("user", DEMO_REQUEST_MESSAGE)
        return await self._run_analysis(
            serialize_records(batch, indent=2),
            failure_message=ANALYSIS_FAILED_MESSAGE,
            keep_report=True,
        )

    async def load_sample(self, source: str | Path = DEFAULT_SAMPLE_PATH) -> str | None:
        try:
            text, batch = await read_sample(source)
        except SampleLoadError as e:
            logger.warning("%s", e)
            self._append("assistant", SAMPLE_FAILED_MESSAGE)
            return None

        self._set_batch(batch)
        return await self._run_analysis(
            text, failure_message=ANALYSIS_FAILED_MESSAGE, keep_report=True
        )

    async def chat(self, message: str) -> str | None:
        if not message.strip():
            return None
        self._append("user", message)
        if DEMO_KEYWORD in message.lower():
            return await self.run_demo()

        context = build_context(self._state.batch, message, limit=self._cfg.context_limit)
        return await self._run_analysis(
            context, failure_message=CHAT_FAILED_MESSAGE, keep_report=False
        )

    async def analyze_single_event(self, event_text: str) -> str | None:
        if not event_text.strip():
            return None
        self._append("user", f"Analyze this single event: {event_text}")
        return await self._run_analysis(
            build_single_event_text(event_text),
            failure_message=SINGLE_EVENT_FAILED_MESSAGE,
            keep_report=False,
        )

    def clear_chat(self) -> None:
        self._state = replace(
            self._state, messages=(ChatMessage("assistant", CHAT_CLEARED_MESSAGE),)
        )

    def stats(self) -> Stats:
        return compute_stats(self._state.batch)

    def timeline(self) -> list[TimelineBucket]:
        return compute_timeline(self._state.batch, tz=self._tz)

    def filter_logs(self, ip: str) -> LogBatch:
        return filter_by_ip(self._state.batch, ip)

    def export_report(self, *, now: datetime | None = None) -> ExportReport | None:
        """Report for the last successful analysis, or None if there is none."""
        if not self._state.analysis_output:
            return None
        return build_report(self._state.analysis_output, self._state.batch, now=now)
