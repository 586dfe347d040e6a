"""Gemini-backed log analysis.

The analyzer is a black box: it gets (possibly truncated) log text and returns
a Markdown report. Nothing here inspects or verifies the report.
"""

from __future__ import annotations

import asyncio
import logging
import os

from ..truncate import prepare
from .models import AnalyzerConfig, resolve_analyzer_config
from .prompt import SYSTEM_INSTRUCTION, build_analysis_prompt

logger = logging.getLogger(__name__)

NO_ANALYSIS = "No analysis generated."
TOO_LARGE_MESSAGE = (
    "⚠️ The log file is too large for full analysis. I've attempted to truncate it, "
    "but it still exceeds limits. Please try uploading a smaller segment."
)
ANALYSIS_FAILED_MESSAGE = "⚠️ Error analyzing logs. Please check your API key and input format."
CHAT_FAILED_MESSAGE = "⚠️ Error processing request."
SINGLE_EVENT_FAILED_MESSAGE = "⚠️ Error analyzing single event."

_TOO_LARGE_MARKER = "token count"


class AnalyzerError(RuntimeError):
    """The analysis service could not produce a report."""


def _call_gemini(prompt: str, *, cfg: AnalyzerConfig) -> str:
    """Call Gemini once and return the report text."""
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise AnalyzerError("Missing GEMINI_API_KEY (or GOOGLE_API_KEY).")

    try:
        from google import genai
    except ImportError as e:  # pragma: no cover
        raise AnalyzerError(
            "google-genai is required for analysis. Install with: pip install google-genai"
        ) from e

    client = genai.Client(api_key=api_key)

    config: dict[str, object] = {"system_instruction": SYSTEM_INSTRUCTION}
    if cfg.temperature is not None:
        config["temperature"] = cfg.temperature

    try:
        resp = client.models.generate_content(model=cfg.model, contents=prompt, config=config)
    except Exception as e:
        raise AnalyzerError(str(e)) from e

    return resp.text or NO_ANALYSIS


async def analyze(text: str, *, cfg: AnalyzerConfig | None = None) -> str:
    """Bound ``text``, send it for analysis and return the report.

    Raises AnalyzerError on failure. There is no retry.
    """
    cfg = resolve_analyzer_config(cfg)
    request = prepare(text)
    prompt = build_analysis_prompt(request.payload)
    logger.debug(
        "Sending %s characters to %s (truncated=%s)",
        len(request.payload),
        cfg.model,
        request.was_truncated,
    )
    return await asyncio.to_thread(_call_gemini, prompt, cfg=cfg)


def describe_failure(exc: BaseException, *, fallback: str = ANALYSIS_FAILED_MESSAGE) -> str:
    """Map an analyzer failure to the message shown to the user."""
    if _TOO_LARGE_MARKER in str(exc).lower():
        return TOO_LARGE_MESSAGE
    return fallback
