"""Data structures for Tap the Post."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import SEGMENT_FILENAME


@dataclass(frozen=True)
class SliceBoundary:
    """Row range of one slice in source-pixel coordinates (end exclusive)."""
    start_row: int
    end_row: int
    fallback: bool = False  # True when taken from the untrimmed quartile split

    @property
    def height(self) -> int:
        return self.end_row - self.start_row

    def to_box(self, width: int) -> tuple[int, int, int, int]:
        """Return the full-width crop box ``(left, upper, right, lower)``."""
        return (0, self.start_row, width, self.end_row)


@dataclass(frozen=True)
class SlicePlan:
    """Geometry computed once per image."""
    image_width: int
    image_height: int
    display_scale: float
    gap_source_px: float
    content_height: float
    boundaries: tuple[SliceBoundary, ...]

    @property
    def heights(self) -> list[int]:
        return [b.height for b in self.boundaries]

    @property
    def gap_rows(self) -> int:
        """Rows skipped between consecutive slices."""
        return sum(
            max(0, nxt.start_row - prev.end_row)
            for prev, nxt in zip(self.boundaries, self.boundaries[1:])
        )

    @property
    def used_fallback(self) -> bool:
        return any(b.fallback for b in self.boundaries)


@dataclass(frozen=True)
class WatermarkMetrics:
    """Badge layout in slice pixel coordinates."""
    font_size: float
    font_px: int
    padding_x: float
    padding_y: float
    spacing: float
    text_width: int
    text_height: int
    logo_width: int
    logo_height: int
    block_width: int
    block_height: int
    margin: float
    x: int
    y: int
    radius: int

    @property
    def has_logo(self) -> bool:
        return self.logo_width > 0

    def to_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.block_width, self.y + self.block_height)


@dataclass
class SliceResult:
    """Four encoded slices, index 0 is the top of the source image."""
    slices: list[bytes]
    plan: SlicePlan
    watermarked: bool = False
    warnings: list[str] = field(default_factory=list)

    def filenames(self) -> list[str]:
        return [SEGMENT_FILENAME.format(index=i + 1) for i in range(len(self.slices))]
