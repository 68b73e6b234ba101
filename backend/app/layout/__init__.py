"""Slice and badge geometry for Tap the Post."""

from .badge import compute_watermark_metrics, measure_text
from .geometry import compute_boundaries, display_scale_for, plan_slices

__all__ = [
    "compute_boundaries",
    "compute_watermark_metrics",
    "display_scale_for",
    "measure_text",
    "plan_slices",
]
