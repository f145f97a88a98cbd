"""
Tests for geometric raster operations
"""

import numpy as np
import pytest

from docraster.config import SkewDetectionConfig, settings
from docraster.drawing import Color, MeasurementUnits, PixelBuffer, Rectangle
from docraster.raster import (
    AllocationError,
    FlipMode,
    RasterError,
    RotateMode,
    ValidationError,
    add_border,
    binarize,
    content_bounds,
    crop,
    estimate_skew,
    grayscale,
    redact,
    resize,
    resize_to,
    rotate,
    rotate_flip,
    rotated_size,
    trim,
)
from docraster.raster.validation import ensure_allocatable, validate_crop_area


class TestCrop:
    """Crop clamping and copying"""

    def test_inside_area(self, noise_buffer):
        result = crop(noise_buffer, Rectangle(5, 7, 10, 12))
        assert (result.width, result.height) == (10, 12)
        assert np.array_equal(result.pixels, noise_buffer.pixels[7:19, 5:15])

    def test_tuple_area(self, noise_buffer):
        assert crop(noise_buffer, (5, 7, 10, 12)) == crop(noise_buffer, Rectangle(5, 7, 10, 12))

    def test_oversized_area_returns_whole_buffer(self, noise_buffer):
        area = Rectangle(-5, -5, noise_buffer.width + 100, noise_buffer.height + 100)
        assert crop(noise_buffer, area) == noise_buffer

    def test_zero_size_means_to_edge(self, noise_buffer):
        result = crop(noise_buffer, Rectangle(10, 20, 0, 0))
        assert (result.width, result.height) == (noise_buffer.width - 10, noise_buffer.height - 20)

    def test_area_outside_buffer(self, noise_buffer):
        with pytest.raises(ValidationError):
            crop(noise_buffer, Rectangle(noise_buffer.width, 0, 5, 5))

    def test_non_pixel_units_rejected(self, noise_buffer):
        with pytest.raises(ValidationError):
            crop(noise_buffer, Rectangle(0, 0, 5, 5, MeasurementUnits.MILLIMETERS))

    def test_result_is_independent(self, noise_buffer):
        result = crop(noise_buffer, Rectangle(0, 0, 5, 5))
        before = noise_buffer.clone()
        result[0, 0] = Color.TRANSPARENT
        assert noise_buffer == before

    def test_validate_clamps(self):
        assert validate_crop_area(100, 50, Rectangle(-10, 40, 200, 30)) == Rectangle(0, 40, 100, 10)


class TestResize:
    """Uniform and exact resampling"""

    def test_scale_dimensions(self, noise_buffer):
        result = resize(noise_buffer, 2.0)
        assert (result.width, result.height) == (106, 74)

    def test_scale_truncates(self, noise_buffer):
        result = resize(noise_buffer, 0.5)
        assert (result.width, result.height) == (26, 18)

    def test_round_trip_dimensions(self, noise_buffer):
        result = resize(resize(noise_buffer, 2.0), 0.5)
        assert (result.width, result.height) == (noise_buffer.width, noise_buffer.height)

    def test_uniform_color_preserved(self, red):
        buffer = PixelBuffer(10, 10, red)
        assert resize(buffer, 3.0) == PixelBuffer(30, 30, red)

    @pytest.mark.parametrize("scale", [0, -1.5])
    def test_non_positive_scale(self, noise_buffer, scale):
        with pytest.raises(ValidationError):
            resize(noise_buffer, scale)

    def test_scale_to_nothing(self, noise_buffer):
        with pytest.raises(ValidationError):
            resize(noise_buffer, 0.01)

    def test_resize_to(self, noise_buffer):
        result = resize_to(noise_buffer, 20, 90)
        assert (result.width, result.height) == (20, 90)

    def test_allocation_ceiling(self, noise_buffer, monkeypatch):
        monkeypatch.setattr(settings.raster, "max_allocation_bytes", 1000)
        with pytest.raises(AllocationError):
            resize(noise_buffer, 2.0)


class TestRotate:
    """Arbitrary-angle rotation onto an enlarged canvas"""

    def test_zero_keeps_dimensions(self, noise_buffer):
        result = rotate(noise_buffer, 0.0)
        assert (result.width, result.height) == (noise_buffer.width, noise_buffer.height)

    def test_quarter_turn_swaps_dimensions(self, noise_buffer):
        result = rotate(noise_buffer, 90.0)
        assert (result.width, result.height) == (noise_buffer.height, noise_buffer.width)

    def test_rotated_size(self):
        assert rotated_size(200, 100, 0) == (200, 100)
        assert rotated_size(200, 100, 90) == (100, 200)
        assert rotated_size(200, 100, 180) == (200, 100)
        assert rotated_size(100, 100, 45) == (141, 141)

    def test_corners_use_background(self, red):
        buffer = PixelBuffer(100, 100, Color.BLACK)
        result = rotate(buffer, 45.0, background=red)
        assert result[0, 0] == red
        assert result[result.width - 1, result.height - 1] == red

    def test_default_background_is_white(self):
        buffer = PixelBuffer(100, 100, Color.BLACK)
        assert rotate(buffer, 30.0)[0, 0] == Color.WHITE

    def test_positive_angle_is_counter_clockwise(self):
        """A mark right of center ends up above center after +90 degrees"""
        buffer = PixelBuffer(21, 21)
        buffer[20, 10] = Color.BLACK
        result = rotate(buffer, 90.0)
        ys, xs = np.nonzero(result.luminance() < 128)
        assert ys.tolist() == [0]
        assert xs.tolist() == [10]

    def test_default_angle_uses_estimate(self, single_line_page):
        expected = rotate(single_line_page, estimate_skew(single_line_page))
        assert rotate(single_line_page) == expected

    def test_default_angle_honours_skew_config(self, single_line_page):
        skew_config = SkewDetectionConfig(top_lines=1)
        expected = rotate(single_line_page, estimate_skew(single_line_page, skew_config))
        assert rotate(single_line_page, skew_config=skew_config) == expected

    def test_input_not_modified(self, noise_buffer):
        before = noise_buffer.clone()
        rotate(noise_buffer, 12.5)
        assert noise_buffer == before


class TestTrim:
    """White margin removal"""

    def test_content_bounds(self, boxed_page):
        assert content_bounds(boxed_page) == Rectangle(40, 30, 60, 40)

    def test_trim_to_content(self, boxed_page):
        result = trim(boxed_page)
        assert (result.width, result.height) == (60, 40)
        assert not np.any(result.pixels[..., :3])

    def test_all_white_returns_copy(self, white_page):
        result = trim(white_page)
        assert result == white_page
        assert result is not white_page
        assert content_bounds(white_page) is None

    def test_alpha_ignored(self):
        buffer = PixelBuffer(10, 10, Color.TRANSPARENT)
        assert content_bounds(buffer) is None

    def test_near_white_is_content(self):
        buffer = PixelBuffer(10, 10)
        buffer[3, 4] = Color.from_rgb(255, 254, 255)
        result = trim(buffer)
        assert (result.width, result.height) == (1, 1)


class TestAddBorder:
    """Solid borders"""

    def test_dimensions_and_ring(self, noise_buffer, red):
        result = add_border(noise_buffer, red, 3)
        assert (result.width, result.height) == (noise_buffer.width + 6, noise_buffer.height + 6)

        ring = np.ones((result.height, result.width), dtype=bool)
        ring[3:-3, 3:-3] = False
        assert (result.pixels[ring] == red.rgba).all()
        assert np.array_equal(result.pixels[3:-3, 3:-3], noise_buffer.pixels)

    def test_zero_width(self, noise_buffer, red):
        assert add_border(noise_buffer, red, 0) == noise_buffer

    def test_negative_width(self, noise_buffer, red):
        with pytest.raises(ValidationError):
            add_border(noise_buffer, red, -1)


class TestRotateFlip:
    """Lossless quarter turns and mirrors"""

    @pytest.fixture
    def marked(self, red):
        buffer = PixelBuffer(3, 2)
        buffer[0, 0] = red
        return buffer

    def test_rotate_90_clockwise(self, marked, red):
        result = rotate_flip(marked, RotateMode.ROTATE_90)
        assert (result.width, result.height) == (2, 3)
        assert result[1, 0] == red

    def test_rotate_180(self, marked, red):
        assert rotate_flip(marked, RotateMode.ROTATE_180)[2, 1] == red

    def test_rotate_270(self, marked, red):
        assert rotate_flip(marked, RotateMode.ROTATE_270)[0, 2] == red

    def test_flip_horizontal(self, marked, red):
        assert rotate_flip(marked, flip_mode=FlipMode.HORIZONTAL)[2, 0] == red

    def test_flip_vertical(self, marked, red):
        assert rotate_flip(marked, flip_mode="vertical")[0, 1] == red

    def test_none_is_copy(self, marked):
        result = rotate_flip(marked)
        assert result == marked
        result[1, 1] = Color.BLACK
        assert marked[1, 1] == Color.WHITE


class TestRedact:
    """Painting over regions"""

    def test_region_filled(self, noise_buffer):
        result = redact(noise_buffer, Rectangle(2, 3, 4, 5))
        assert (result.pixels[3:8, 2:6] == Color.BLACK.rgba).all()
        assert np.array_equal(result.pixels[8:], noise_buffer.pixels[8:])

    def test_custom_color_and_clamping(self, red):
        buffer = PixelBuffer(10, 10)
        result = redact(buffer, (-5, -5, 8, 8), red)
        assert result[7, 7] == red
        assert result[8, 8] == Color.WHITE


class TestColorReduction:
    """Grayscale and binarization"""

    def test_grayscale_weights(self):
        buffer = PixelBuffer(1, 1, Color(128, 255, 0, 0))
        assert grayscale(buffer)[0, 0] == Color(128, 54, 54, 54)

    def test_grayscale_result_is_gray(self, noise_buffer):
        assert grayscale(noise_buffer).is_grayscale

    def test_binarize(self):
        buffer = PixelBuffer(2, 1)
        buffer[0, 0] = Color.from_rgb(200, 200, 200)
        buffer[1, 0] = Color.from_rgb(100, 100, 100, alpha=10)

        result = binarize(buffer)

        assert result[0, 0] == Color.WHITE
        assert result[1, 0] == Color.BLACK

    def test_binarize_threshold(self):
        buffer = PixelBuffer(1, 1, Color.from_rgb(100, 100, 100))
        assert binarize(buffer, threshold=30)[0, 0] == Color.WHITE


class TestErrors:
    """Error taxonomy"""

    def test_hierarchy(self):
        assert issubclass(ValidationError, RasterError)
        assert issubclass(ValidationError, ValueError)
        assert issubclass(AllocationError, MemoryError)

    def test_ensure_allocatable_explicit_limit(self):
        ensure_allocatable(10, 10, limit=400)
        with pytest.raises(AllocationError):
            ensure_allocatable(10, 10, limit=399)

    def test_default_ceiling(self):
        with pytest.raises(AllocationError):
            ensure_allocatable(100_000, 100_000)
