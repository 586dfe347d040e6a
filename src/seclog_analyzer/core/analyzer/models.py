"""Analyzer configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from ..context import CONTEXT_LIMIT

MODEL_ENV = "SECLOG_MODEL"
CONTEXT_LIMIT_ENV = "SECLOG_CONTEXT_LIMIT"


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    model: str = "gemini-3-flash-preview"
    temperature: float | None = None  # None keeps the model default
    context_limit: int = CONTEXT_LIMIT


def resolve_analyzer_config(cfg: AnalyzerConfig | None) -> AnalyzerConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = AnalyzerConfig()

    model = os.getenv(MODEL_ENV)
    if model:
        cfg = replace(cfg, model=model)

    env = os.getenv(CONTEXT_LIMIT_ENV)
    if env is None or env == "":
        return cfg

    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{CONTEXT_LIMIT_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{CONTEXT_LIMIT_ENV} must be >= 1")

    if value == cfg.context_limit:
        return cfg
    return replace(cfg, context_limit=value)
