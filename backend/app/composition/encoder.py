"""Lossless slice encoding."""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from PIL import Image

from ..config import Config
from ..constants import OUTPUT_FORMAT
from ..exceptions import EncodeError

logger = logging.getLogger("tapthepost.composition.encoder")


def encode_png(image: Image.Image) -> bytes:
    """Serialize an image as PNG.

    The compress level is fixed and no text chunks are written, so identical
    pixels always produce identical bytes.

    Raises:
        EncodeError: If the image cannot be written as PNG.
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format=OUTPUT_FORMAT, compress_level=Config.PNG_COMPRESS_LEVEL)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(
            f"Failed to encode {image.mode} {image.width}x{image.height} image: {e}"
        ) from e
    return buffer.getvalue()


def encode_slices(images: Sequence[Image.Image], max_workers: int = 1) -> list[bytes]:
    """Encode every slice, keeping order."""
    if max_workers <= 1 or len(images) <= 1:
        return [encode_png(img) for img in images]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(images))) as ex:
        return list(ex.map(encode_png, images))
