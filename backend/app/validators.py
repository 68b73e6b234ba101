"""Input validation for Tap the Post."""

from __future__ import annotations

from pathlib import Path

from .constants import SUPPORTED_EXTENSIONS
from .exceptions import GeometryError, ValidationError


def validate_dimensions(width: int, height: int) -> None:
    """Validate source image dimensions before slicing.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        GeometryError: If dimensions are not positive numbers.
    """
    if isinstance(width, bool) or isinstance(height, bool):
        raise GeometryError("Dimensions must be numbers, got bool")
    if not isinstance(width, int | float) or not isinstance(height, int | float):
        raise GeometryError(
            f"Dimensions must be numbers, got {type(width).__name__} and {type(height).__name__}"
        )

    if width <= 0 or height <= 0:
        raise GeometryError(f"Dimensions must be positive, got {width}x{height}")


def validate_file_path(path: str) -> None:
    """Validate input file exists and has supported extension.

    Args:
        path: Path to the input file.

    Raises:
        ValidationError: If file doesn't exist or format is unsupported.
    """
    p = Path(path)
    if not p.exists():
        raise ValidationError(f"File not found: {path}")
    if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValidationError(
            f"Unsupported format '{p.suffix}'. Allowed: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
