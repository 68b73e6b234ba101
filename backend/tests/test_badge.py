"""Tests for watermark badge layout."""

import pytest

from backend.app.layout.badge import compute_watermark_metrics, measure_text
from backend.app.layout.geometry import display_scale_for, round_half_up


def fixed_measure(text: str, font_px: int) -> tuple[int, int]:
    """Monospace stand-in for real font metrics."""
    return (int(len(text) * font_px * 0.6), font_px)


SIZES = [20, 21, 37, 64, 100, 390, 1000, 4000, 10000]


def _assert_contained(metrics, width, height):
    assert metrics is not None
    assert metrics.x >= 0
    assert metrics.y >= 0
    assert metrics.x + metrics.block_width <= width
    assert metrics.y + metrics.block_height <= height


def _assert_content_fits(metrics):
    content_w = (
        2 * metrics.padding_x + metrics.text_width + metrics.spacing + metrics.logo_width
    )
    content_h = 2 * metrics.padding_y + max(metrics.text_height, metrics.logo_height)
    # Logo sizes are rounded half up
    assert content_w <= metrics.block_width + 0.5
    assert content_h <= metrics.block_height + 0.5


class TestMeasureText:
    def test_empty_text(self):
        assert measure_text("", 12) == (0, 0)

    def test_larger_font_is_wider(self):
        small_w, _ = measure_text("tap-the-post", 12)
        large_w, _ = measure_text("tap-the-post", 48)
        assert large_w > small_w > 0


class TestWatermarkMetrics:
    @pytest.mark.parametrize("logo_size", [None, (64, 32), (10, 40)])
    def test_contained_for_all_sizes(self, logo_size):
        for width in SIZES:
            for height in SIZES:
                scale = display_scale_for(width, 390)
                metrics = compute_watermark_metrics(
                    (width, height), scale, logo_size=logo_size, measure=fixed_measure
                )
                _assert_contained(metrics, width, height)

    @pytest.mark.parametrize("width,height", [(20, 20), (20, 10000), (10000, 20), (390, 100), (10000, 10000)])
    def test_contained_with_real_font(self, width, height):
        scale = display_scale_for(width, 390)
        metrics = compute_watermark_metrics((width, height), scale, logo_size=(64, 32))
        if width >= 390 and height >= 100:
            assert metrics is not None
        if metrics is not None:
            _assert_contained(metrics, width, height)
            _assert_content_fits(metrics)

    @pytest.mark.parametrize("logo_size", [None, (64, 32), (10, 40)])
    def test_content_never_clipped(self, logo_size):
        for width in SIZES:
            for height in SIZES:
                scale = display_scale_for(width, 390)
                metrics = compute_watermark_metrics(
                    (width, height), scale, logo_size=logo_size, measure=fixed_measure
                )
                _assert_content_fits(metrics)

    def test_logo_dropped_when_it_cannot_fit(self):
        metrics = compute_watermark_metrics(
            (20, 20), 1.0, logo_size=(64, 32), measure=fixed_measure
        )
        _assert_contained(metrics, 20, 20)
        assert not metrics.has_logo
        assert metrics.spacing == 0
        assert 2 * metrics.padding_x + metrics.text_width <= metrics.block_width

    def test_logo_kept_on_short_wide_slice(self):
        scale = display_scale_for(10000, 390)
        metrics = compute_watermark_metrics(
            (10000, 20), scale, logo_size=(64, 32), measure=fixed_measure
        )
        _assert_contained(metrics, 10000, 20)
        assert metrics.has_logo
        _assert_content_fits(metrics)

    def test_label_that_cannot_fit_is_skipped(self):
        def wide_measure(text, font_px):
            return (14, 1)

        assert compute_watermark_metrics((20, 20), 1.0, measure=wide_measure) is None
        assert compute_watermark_metrics(
            (20, 20), 1.0, logo_size=(64, 32), measure=wide_measure
        ) is None

    def test_font_clamped_to_minimum(self):
        metrics = compute_watermark_metrics((1200, 1200), 0.325, measure=fixed_measure)
        assert metrics.font_size == pytest.approx(10 / 0.325)

    def test_font_within_display_bounds_on_roomy_slice(self):
        for scale in (1.0, 0.5, 0.1):
            metrics = compute_watermark_metrics((20000, 20000), scale, measure=fixed_measure)
            assert 10 / scale - 1e-6 <= metrics.font_size <= 18 / scale + 1e-6

    def test_anchored_bottom_right(self):
        metrics = compute_watermark_metrics((390, 300), 1.0, measure=fixed_measure)
        assert metrics.margin == 12
        assert 390 - 12 - 1 < metrics.x + metrics.block_width <= 390 - 12
        assert 300 - 12 - 1 < metrics.y + metrics.block_height <= 300 - 12

    def test_margin_never_below_minimum_on_large_slices(self):
        metrics = compute_watermark_metrics((390, 300), 1.0, measure=fixed_measure)
        assert metrics.margin >= 8

    def test_text_only_badge(self):
        metrics = compute_watermark_metrics((390, 300), 1.0, measure=fixed_measure)
        assert not metrics.has_logo
        assert metrics.spacing == 0

    def test_logo_box_at_least_square(self):
        metrics = compute_watermark_metrics(
            (390, 300), 1.0, logo_size=(10, 40), measure=fixed_measure
        )
        f = metrics.font_size
        assert metrics.logo_height == round_half_up(max(1.35 * f, f + 2))
        assert metrics.logo_width == metrics.logo_height

    def test_wide_logo_keeps_aspect(self):
        metrics = compute_watermark_metrics(
            (390, 300), 1.0, logo_size=(64, 32), measure=fixed_measure
        )
        assert abs(metrics.logo_width - 2 * metrics.logo_height) <= 1
        assert metrics.spacing == pytest.approx(0.6 * metrics.font_size)

    def test_radius_is_half_height_at_most(self):
        metrics = compute_watermark_metrics((390, 300), 1.0, measure=fixed_measure)
        assert metrics.radius <= metrics.block_height / 2
        assert metrics.radius <= metrics.block_width / 2

    def test_badge_size_follows_display_scale(self):
        """Same on-screen size whatever the source resolution."""
        small = compute_watermark_metrics((390, 2000), 1.0, measure=fixed_measure)
        large = compute_watermark_metrics((1560, 8000), 0.25, measure=fixed_measure)
        assert large.font_size == pytest.approx(small.font_size * 4)

    def test_no_room_returns_none(self):
        assert compute_watermark_metrics((1, 1), 1.0, measure=fixed_measure) is None
