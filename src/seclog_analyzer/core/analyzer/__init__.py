"""Analyzer package."""

from __future__ import annotations

from .models import AnalyzerConfig, resolve_analyzer_config
from .prompt import build_analysis_prompt, build_single_event_text
from .service import (
    ANALYSIS_FAILED_MESSAGE,
    CHAT_FAILED_MESSAGE,
    SINGLE_EVENT_FAILED_MESSAGE,
    TOO_LARGE_MESSAGE,
    AnalyzerError,
    analyze,
    describe_failure,
)

__all__ = [
    "ANALYSIS_FAILED_MESSAGE",
    "CHAT_FAILED_MESSAGE",
    "SINGLE_EVENT_FAILED_MESSAGE",
    "TOO_LARGE_MESSAGE",
    "AnalyzerConfig",
    "AnalyzerError",
    "analyze",
    "build_analysis_prompt",
    "build_single_event_text",
    "describe_failure",
    "resolve_analyzer_config",
]
