"""Main slicing orchestrator."""

from __future__ import annotations

import logging

from PIL import Image

from .composition import apply_watermark, encode_slices, load_logo, render_slices
from .config import Config
from .constants import WATERMARK_SLICE_INDEX
from .layout import plan_slices
from .models import SlicePlan, SliceResult
from .parser import ImageParser

logger = logging.getLogger("tapthepost.slicer")


class SliceEngine:
    """Turn one image into four gap-trimmed slices.

    Pipeline: decode -> geometry -> crop -> badge on the last slice -> PNG.
    The engine holds no per-image state, so one instance can serve any
    number of invocations.
    """

    def __init__(
        self,
        watermark: bool = True,
        logo_path: str | None = Config.WATERMARK_LOGO_PATH,
        label: str = Config.WATERMARK_LABEL,
        font_path: str | None = Config.WATERMARK_FONT_PATH,
        max_workers: int = Config.SLICE_WORKERS,
    ) -> None:
        self.parser = ImageParser()
        self.watermark = watermark
        self.logo_path = logo_path
        self.label = label
        self.font_path = font_path
        self.max_workers = max_workers

    def plan(self, width: int, height: int) -> SlicePlan:
        """Compute slice geometry for an image size.

        Raises:
            GeometryError: If either dimension is not positive.
        """
        return plan_slices(width, height)

    def render(
        self, image: Image.Image, warnings: list[str] | None = None
    ) -> tuple[list[Image.Image], SlicePlan, bool]:
        """Crop and mark the slices of a decoded image.

        Args:
            image: Decoded source image. It is not modified.
            warnings: Optional list collecting non-fatal degradations.

        Returns:
            Tuple of (four slice images, plan, whether a badge was drawn).
        """
        plan = self.plan(image.width, image.height)
        slices = render_slices(image, plan.boundaries, self.max_workers)

        if plan.used_fallback and warnings is not None:
            warnings.append("Image too short for gap trimming; some slices are untrimmed")

        watermarked = False
        if self.watermark:
            logo = load_logo(self.logo_path)
            if self.logo_path and logo is None and warnings is not None:
                warnings.append("Logo unavailable; badge drawn without logo")
            metrics = apply_watermark(
                slices[WATERMARK_SLICE_INDEX],
                plan.display_scale,
                logo=logo,
                label=self.label,
                font_path=self.font_path,
            )
            watermarked = metrics is not None
            if not watermarked and warnings is not None:
                warnings.append("Last slice too small for the watermark badge")

        return slices, plan, watermarked

    def slice_image(self, image: Image.Image) -> SliceResult:
        """Slice an already decoded image and encode the results."""
        warnings: list[str] = []
        slices, plan, watermarked = self.render(image, warnings)
        encoded = encode_slices(slices, self.max_workers)

        logger.info(
            "Sliced %dx%d image: heights %s, gap %.1f px, scale %.3f%s",
            plan.image_width,
            plan.image_height,
            plan.heights,
            plan.gap_source_px,
            plan.display_scale,
            " (fallback)" if plan.used_fallback else "",
        )
        return SliceResult(
            slices=encoded, plan=plan, watermarked=watermarked, warnings=warnings
        )

    def slice_bytes(self, data: bytes) -> SliceResult:
        """Decode, slice and encode one image.

        Raises:
            DecodeError: If ``data`` is not an image.
            GeometryError: If the decoded image has no pixels.
            EncodeError: If a slice cannot be written.
        """
        return self.slice_image(self.parser.decode(data))

    def slice_file(self, file_path: str) -> SliceResult:
        """Like :meth:`slice_bytes`, reading the image from disk."""
        return self.slice_image(self.parser.parse(file_path))


def slice_image(data: bytes) -> list[bytes]:
    """Slice encoded image bytes into four PNG slices, top to bottom."""
    return SliceEngine().slice_bytes(data).slices
