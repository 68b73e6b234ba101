"""Custom exception hierarchy for Tap the Post."""

from __future__ import annotations


class TapThePostError(Exception):
    """Base exception for all Tap the Post errors."""


class DecodeError(TapThePostError):
    """Raised when input bytes are not a decodable image."""


class ValidationError(TapThePostError):
    """Raised when input validation fails."""


class GeometryError(ValidationError):
    """Raised when image dimensions cannot be sliced."""


class CompositionError(TapThePostError):
    """Raised when cropping or badge compositing fails."""


class EncodeError(TapThePostError):
    """Raised when a slice cannot be serialized."""
