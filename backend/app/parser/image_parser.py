"""Image decoding (PNG, JPG, WEBP and other Pillow formats) for Tap the Post."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

from ..exceptions import DecodeError
from ..validators import validate_file_path

logger = logging.getLogger("tapthepost.parser.image")


class ImageParser:
    """Decode raster images into an addressable Pillow image.

    EXIF orientation is applied, as a browser would when displaying the
    photo. The result is ``RGBA`` when any pixel is translucent and ``RGB``
    otherwise, so opaque sources do not grow an alpha channel.
    """

    def parse(self, file_path: str) -> Image.Image:
        """Read and decode an image file.

        Raises:
            ValidationError: If the path is missing or has an unsupported suffix.
            DecodeError: If the file is not a decodable image.
        """
        validate_file_path(file_path)
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise DecodeError(f"Failed to read image '{file_path}': {e}") from e

        img = self.decode(data)
        logger.info("Parsed image %s: %dx%d", Path(file_path).name, img.width, img.height)
        return img

    def decode(self, data: bytes) -> Image.Image:
        """Decode raw image bytes.

        Args:
            data: Encoded image.

        Returns:
            Fully loaded RGB or RGBA image.

        Raises:
            DecodeError: If the bytes are empty or not a recognizable image.
        """
        if not data:
            raise DecodeError("No image data")

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                oriented = ImageOps.exif_transpose(img)
            return self._normalize_mode(oriented)
        except Exception as e:
            raise DecodeError(f"Failed to decode image: {e}") from e

    @classmethod
    def _normalize_mode(cls, img: Image.Image) -> Image.Image:
        if img.mode == "RGB":
            return img
        rgba = img if img.mode == "RGBA" else img.convert("RGBA")
        if cls._has_alpha(rgba):
            return rgba
        return img.convert("RGB")

    @staticmethod
    def _has_alpha(img: Image.Image) -> bool:
        """Return True if any pixel is not fully opaque."""
        alpha = np.asarray(img.getchannel("A"))
        return bool((alpha < 255).any())


def decode_image(data: bytes) -> Image.Image:
    """Decode raw image bytes, see :meth:`ImageParser.decode`."""
    return ImageParser().decode(data)
