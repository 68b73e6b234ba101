"""Shared constants for Tap the Post."""

from __future__ import annotations

# A 4-up post: four slices separated by three gaps
SLICE_COUNT = 4
GAP_COUNT = SLICE_COUNT - 1

# Index of the slice that carries the watermark badge
WATERMARK_SLICE_INDEX = SLICE_COUNT - 1

# Supported file extensions for path-based input
SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp")

OUTPUT_FORMAT = "PNG"
SEGMENT_FILENAME = "tap-the-post-segment-{index}.png"
