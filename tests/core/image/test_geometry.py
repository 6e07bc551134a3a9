"""
Tests for core.image.geometry module.

Tests flip, crop, relative crop, rotation and shrink-only scaling.
"""

import numpy as np
import pytest

from api.exceptions import BoundsError
from core.image.geometry import crop, flip, relative_rect, rotate, rotated_bounds, scale
from image_helpers import make_image


class TestFlip:
    """Tests for flip function."""

    def test_no_axis_returns_same_buffer(self, gradient_image):
        assert flip(gradient_image, False, False) is gradient_image

    def test_horizontal(self, gradient_image):
        result = flip(gradient_image, True, False)

        np.testing.assert_array_equal(result[:, 0], gradient_image[:, -1])

    def test_vertical(self, gradient_image):
        result = flip(gradient_image, False, True)

        np.testing.assert_array_equal(result[0], gradient_image[-1])

    def test_both(self, gradient_image):
        result = flip(gradient_image, True, True)

        np.testing.assert_array_equal(result, gradient_image[::-1, ::-1])

    def test_double_flip_is_identity(self, gradient_image):
        result = flip(flip(gradient_image, True, False), True, False)

        np.testing.assert_array_equal(result, gradient_image)


class TestCrop:
    """Tests for crop function."""

    def test_crop(self, gradient_image):
        result = crop(gradient_image, 10, 5, 20, 15)

        assert result.shape == (15, 20, 4)
        np.testing.assert_array_equal(result, gradient_image[5:20, 10:30])

    def test_crop_is_copy(self, gradient_image):
        result = crop(gradient_image, 0, 0, 4, 4)
        result[:] = 0

        assert gradient_image[0, 1, 0] != 0

    def test_full_crop(self, gradient_image):
        result = crop(gradient_image, 0, 0, 64, 48)

        np.testing.assert_array_equal(result, gradient_image)

    def test_exceeds_width(self, gradient_image):
        with pytest.raises(BoundsError) as exc_info:
            crop(gradient_image, 50, 0, 20, 10)

        assert "x + width must be <= bitmap.width()" in exc_info.value.message
        assert exc_info.value.details["bounds"] == {"width": 64, "height": 48}

    def test_exceeds_height(self, gradient_image):
        with pytest.raises(BoundsError):
            crop(gradient_image, 0, 40, 10, 10)

    def test_negative_origin(self, gradient_image):
        with pytest.raises(BoundsError):
            crop(gradient_image, -1, 0, 10, 10)

    def test_empty(self, gradient_image):
        with pytest.raises(BoundsError):
            crop(gradient_image, 0, 0, 0, 10)

    def test_bounds_error_is_value_error(self, gradient_image):
        with pytest.raises(ValueError):
            crop(gradient_image, 0, 0, 100, 100)


class TestRelativeRect:
    """Tests for relative_rect function."""

    def test_full(self, gradient_image):
        assert relative_rect(gradient_image, 0, 0, 1, 1) == (0, 0, 64, 48)

    def test_half(self, gradient_image):
        assert relative_rect(gradient_image, 0.5, 0.5, 0.5, 0.5) == (32, 24, 32, 24)

    def test_rounding(self):
        image = make_image(10, 10)

        # 0.25 * 10 = 2.5 rounds up, 0.24 * 10 = 2.4 rounds down
        assert relative_rect(image, 0.25, 0.24, 0.25, 0.24) == (3, 2, 3, 2)

    def test_full_relative_crop_is_identity(self, gradient_image):
        x, y, w, h = relative_rect(gradient_image, 0, 0, 1, 1)
        result = crop(gradient_image, x, y, w, h)

        np.testing.assert_array_equal(result, gradient_image)


class TestRotate:
    """Tests for rotate function."""

    @pytest.mark.parametrize(
        "angle, expected_shape",
        [
            (0, (48, 64, 4)),
            (90, (64, 48, 4)),
            (180, (48, 64, 4)),
            (270, (64, 48, 4)),
            (-90, (64, 48, 4)),
            (450, (64, 48, 4)),
        ],
    )
    def test_quarter_turn_shapes(self, gradient_image, angle, expected_shape):
        assert rotate(gradient_image, angle).shape == expected_shape

    def test_zero_returns_same_buffer(self, gradient_image):
        assert rotate(gradient_image, 0) is gradient_image
        assert rotate(gradient_image, 360) is gradient_image

    def test_90_is_clockwise(self, gradient_image):
        """Top-left pixel moves to the top-right corner."""
        result = rotate(gradient_image, 90)

        np.testing.assert_array_equal(result[0, -1], gradient_image[0, 0])

    def test_180(self, gradient_image):
        result = rotate(gradient_image, 180)

        np.testing.assert_array_equal(result, gradient_image[::-1, ::-1])

    def test_arbitrary_angle_grows_canvas(self):
        image = make_image(100, 100)
        result = rotate(image, 45)

        assert result.shape == (141, 141, 4)
        # Corners are outside the rotated square
        assert result[0, 0, 3] == 0
        # Center stays opaque red
        assert tuple(result[70, 70]) == (0, 0, 255, 255)


class TestRotatedBounds:
    def test_quarter(self):
        assert rotated_bounds(200, 100, 90) == (100, 200)

    def test_diagonal(self):
        assert rotated_bounds(100, 100, 45) == (141, 141)


class TestScale:
    """Tests for scale function."""

    def test_shrink(self, gradient_image):
        result = scale(gradient_image, 32, 24)

        assert result.shape == (24, 32, 4)

    def test_no_upscale(self, gradient_image):
        """Targets above the current size are clamped."""
        result = scale(gradient_image, 200, 100)

        assert result is gradient_image
        assert result.shape == (48, 64, 4)

    def test_axes_clamped_independently(self, gradient_image):
        result = scale(gradient_image, 32, 500)

        assert result.shape == (48, 32, 4)

    def test_same_size_returns_same_buffer(self, gradient_image):
        assert scale(gradient_image, 64, 48) is gradient_image
