"""Tests for cropping, resizing, encoding and the preview stack."""

import numpy as np
import pytest
from PIL import Image

from backend.app.composition.crop import crop_band, render_slices
from backend.app.composition.encoder import encode_png, encode_slices
from backend.app.composition.preview import build_preview
from backend.app.composition.resize import high_quality_resize
from backend.app.exceptions import CompositionError, EncodeError
from backend.app.layout.geometry import plan_slices
from backend.app.models import SliceBoundary
from backend.app.parser import decode_image


class TestCropBand:
    def test_copies_rows_exactly(self, make_gradient):
        source = make_gradient(50, 300)
        band = crop_band(source, SliceBoundary(40, 90))
        assert band.size == (50, 50)
        assert np.array_equal(np.array(band), np.array(source)[40:90])

    def test_source_not_modified(self, make_gradient):
        source = make_gradient(20, 40)
        before = source.tobytes()
        band = crop_band(source, SliceBoundary(0, 10))
        band.paste((0, 0, 0), (0, 0, 20, 10))
        assert source.tobytes() == before

    def test_out_of_range_rejected(self, make_gradient):
        source = make_gradient(10, 10)
        with pytest.raises(CompositionError):
            crop_band(source, SliceBoundary(5, 11))

    def test_parallel_matches_sequential(self, make_gradient):
        source = make_gradient(120, 400)
        bounds = plan_slices(120, 400).boundaries
        sequential = render_slices(source, bounds, max_workers=1)
        parallel = render_slices(source, bounds, max_workers=4)
        assert [s.tobytes() for s in sequential] == [p.tobytes() for p in parallel]
        assert [s.height for s in parallel] == [b.height for b in bounds]


class TestHighQualityResize:
    def test_resize_rgba_image(self):
        img = Image.new("RGBA", (200, 100), (255, 0, 0, 255))
        result = high_quality_resize(img, (100, 50))
        assert result.size == (100, 50)
        assert result.mode == "RGBA"

    def test_resize_rgb_image(self):
        img = Image.new("RGB", (200, 100), (255, 0, 0))
        result = high_quality_resize(img, (100, 50))
        assert result.size == (100, 50)
        assert result.mode == "RGB"

    def test_resize_grayscale_image(self):
        img = Image.new("L", (100, 100), 128)
        result = high_quality_resize(img, (50, 50))
        assert result.size == (50, 50)
        assert result.mode in ("RGB", "RGBA")

    def test_resize_palette_image(self):
        img = Image.new("P", (100, 100))
        result = high_quality_resize(img, (50, 50))
        assert result.size == (50, 50)

    def test_resize_zero_target_returns_original(self):
        img = Image.new("RGBA", (100, 100))
        result = high_quality_resize(img, (0, 50))
        assert result.size == (100, 100)

    def test_solid_color_preserved(self):
        img = Image.new("RGB", (64, 64), (10, 128, 250))
        result = np.array(high_quality_resize(img, (16, 16))).astype(int)
        assert np.abs(result - np.array([10, 128, 250])).max() <= 1

    def test_transparent_pixels_do_not_bleed(self):
        arr = np.zeros((2, 4, 4), dtype=np.uint8)
        arr[:, :2] = (255, 0, 0, 255)
        arr[:, 2:] = (0, 255, 0, 0)
        result = np.array(high_quality_resize(Image.fromarray(arr), (2, 1)))
        assert result[:, :, 1].max() == 0


class TestEncoder:
    def test_round_trip_rgb(self, make_gradient):
        img = make_gradient(64, 48)
        decoded = decode_image(encode_png(img))
        assert decoded.mode == "RGB"
        assert np.array_equal(np.array(decoded), np.array(img))

    def test_round_trip_rgba(self, translucent_image):
        decoded = decode_image(encode_png(translucent_image))
        assert decoded.mode == "RGBA"
        assert np.array_equal(np.array(decoded), np.array(translucent_image))

    def test_deterministic(self, make_gradient):
        img = make_gradient(64, 48)
        assert encode_png(img) == encode_png(img.copy())

    def test_png_signature(self, make_gradient):
        assert encode_png(make_gradient(4, 4)).startswith(b"\x89PNG\r\n\x1a\n")

    def test_unsupported_mode_raises(self):
        img = Image.new("CMYK", (10, 10))
        with pytest.raises(EncodeError, match="CMYK"):
            encode_png(img)

    def test_encode_slices_keeps_order(self, make_gradient):
        images = [make_gradient(8, h) for h in (1, 2, 3, 4)]
        encoded = encode_slices(images, max_workers=4)
        assert [decode_image(b).height for b in encoded] == [1, 2, 3, 4]


class TestPreview:
    def test_wide_slices_scaled_to_display(self):
        slices = [Image.new("RGB", (780, 200), (0, 0, 255)) for _ in range(4)]
        preview = build_preview(slices)
        assert preview.mode == "RGB"
        assert preview.size == (390, 4 * 100 + 3 * 12)

    def test_narrow_slices_kept(self):
        slices = [Image.new("RGB", (100, 50)) for _ in range(4)]
        preview = build_preview(slices)
        assert preview.size == (100, 4 * 50 + 3 * 12)

    def test_gap_is_background(self):
        slices = [Image.new("RGB", (100, 50), (0, 0, 0)) for _ in range(4)]
        preview = build_preview(slices)
        assert preview.getpixel((50, 50 + 6)) == (255, 255, 255)
        assert preview.getpixel((50, 25)) == (0, 0, 0)

    def test_rgba_slices(self, translucent_image):
        preview = build_preview([translucent_image] * 4)
        assert preview.mode == "RGB"

    def test_empty(self):
        assert build_preview([]).size == (390, 1)
