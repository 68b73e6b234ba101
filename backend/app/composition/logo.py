"""Process-wide cache for the watermark logo."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from PIL import Image

logger = logging.getLogger("tapthepost.composition.logo")

_MISSING = object()

# Keyed by resolved asset path; None records a failed load
_logo_cache: dict[str, Image.Image | None] = {}
_logo_lock = threading.Lock()


def load_logo(path: str | os.PathLike[str] | None) -> Image.Image | None:
    """Return the decoded RGBA logo for ``path``, loading it at most once.

    A logo that cannot be read is logged and cached as None, so the badge
    degrades to text-only without retrying on every invocation. Cached
    images are shared between callers and must not be modified.
    """
    if not path:
        return None

    key = str(Path(path).expanduser().resolve())
    cached = _logo_cache.get(key, _MISSING)
    if cached is not _MISSING:
        return cached

    with _logo_lock:
        cached = _logo_cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        logo = _read_logo(key)
        _logo_cache[key] = logo
        return logo


def clear_logo_cache() -> None:
    """Forget every cached logo."""
    with _logo_lock:
        _logo_cache.clear()


def _read_logo(path: str) -> Image.Image | None:
    try:
        with Image.open(path) as img:
            logo = img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning("Could not load logo '%s': %s. Badge will be text-only.", path, e)
        return None

    logger.info("Loaded logo %s: %dx%d", Path(path).name, logo.width, logo.height)
    return logo
