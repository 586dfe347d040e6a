"""Sample dataset loading (local file or HTTP URL)."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import aiofiles
import requests

from .models import LogBatch
from .normalize import normalize

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_security_logs.json"
FETCH_TIMEOUT_S = 30
SAMPLE_FAILED_MESSAGE = (
    "⚠️ Could not load sample file. Please ensure sample_security_logs.json exists."
)


class SampleLoadError(RuntimeError):
    """The sample document could not be fetched or is not JSON."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch_url(url: str) -> str:
    resp = requests.get(url, timeout=FETCH_TIMEOUT_S)
    resp.raise_for_status()
    return resp.text


async def _read_text(source: str | Path) -> str:
    if isinstance(source, str) and _is_url(source):
        try:
            return await asyncio.to_thread(_fetch_url, source)
        except requests.RequestException as e:
            raise SampleLoadError(f"Could not fetch sample from {source}: {e}") from e

    try:
        async with aiofiles.open(Path(source), encoding="utf-8") as f:
            return await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SampleLoadError(f"Could not read sample file {source}: {e}") from e


async def load_sample(source: str | Path = DEFAULT_SAMPLE_PATH) -> tuple[str, LogBatch]:
    """Load a JSON sample document and return its text with the normalized batch.

    Unlike uploads, samples must be valid JSON; anything else is an error.
    """
    text = await _read_text(source)
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise SampleLoadError(f"Sample is not valid JSON: {e}") from e
    if not isinstance(parsed, (list, dict)):
        raise SampleLoadError("Sample must be a JSON array or object")

    batch = normalize(text)
    logger.info("Loaded %s sample records from %s", len(batch), source)
    return text, batch
