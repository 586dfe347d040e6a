"""Safe resolution of user-supplied log file paths."""

from __future__ import annotations

import os
from pathlib import Path

import aiofiles

ALLOWED_FILE_SUFFIXES = {".log", ".txt", ".json", ".csv"}
BASE_DIR_ENV = "SECLOG_BASE_DIR"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


def base_dir() -> Path:
    """Return the resolved base directory for file access."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def resolve_log_path(path: str) -> Path:
    """Resolve and validate a log file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Log file not found: {resolved}")
    if resolved.suffix.lower() not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


async def read_log_text(path: str) -> str:
    """Read a validated log file as text."""
    p = resolve_log_path(path)
    async with aiofiles.open(p, encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
        return await f.read()
