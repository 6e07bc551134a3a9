"""
Tests for core.image.blending module.

Checks the blend formulas on representative pixels and the placement of
composited images on the canvas.
"""

import numpy as np
import pytest

from common.base import Rect
from common.enums import BlendMode
from core.image.blending import BLEND_FUNCTIONS, blend_pixels, composite
from image_helpers import make_image

RED = (0, 0, 255, 255)
BLUE = (255, 0, 0, 255)
CLEAR = (0, 0, 0, 0)
HALF_RED = (0, 0, 255, 128)


def pixel(color):
    return np.array([[color]], dtype=np.uint8)


def blend(src, dst, mode):
    return tuple(int(v) for v in blend_pixels(pixel(src), pixel(dst), mode)[0, 0])


class TestBlendFunctions:
    """Tests for individual blend modes."""

    def test_every_mode_has_a_function(self):
        assert set(BLEND_FUNCTIONS) == set(BlendMode)

    def test_src_over_opaque(self):
        assert blend(RED, BLUE, BlendMode.SRC_OVER) == RED

    def test_src_over_half_alpha(self):
        b, g, r, a = blend(HALF_RED, BLUE, BlendMode.SRC_OVER)

        assert a == 255
        assert abs(r - 128) <= 1
        assert abs(b - 127) <= 1

    def test_src_over_onto_transparent(self):
        assert blend(HALF_RED, CLEAR, BlendMode.SRC_OVER) == HALF_RED

    def test_dst_over(self):
        assert blend(RED, BLUE, BlendMode.DST_OVER) == BLUE

    def test_clear(self):
        assert blend(RED, BLUE, BlendMode.CLEAR) == CLEAR

    def test_src(self):
        assert blend(HALF_RED, BLUE, BlendMode.SRC) == HALF_RED

    def test_dst(self):
        assert blend(RED, BLUE, BlendMode.DST) == BLUE

    def test_src_in_transparent_destination(self):
        assert blend(RED, CLEAR, BlendMode.SRC_IN) == CLEAR

    def test_src_in_opaque_destination(self):
        assert blend(RED, BLUE, BlendMode.SRC_IN) == RED

    def test_dst_in(self):
        assert blend(CLEAR, BLUE, BlendMode.DST_IN) == CLEAR

    def test_src_out(self):
        assert blend(RED, BLUE, BlendMode.SRC_OUT) == CLEAR
        assert blend(RED, CLEAR, BlendMode.SRC_OUT) == RED

    def test_dst_out(self):
        assert blend(RED, BLUE, BlendMode.DST_OUT) == CLEAR
        assert blend(CLEAR, BLUE, BlendMode.DST_OUT) == BLUE

    def test_src_atop(self):
        assert blend(RED, BLUE, BlendMode.SRC_ATOP) == RED
        assert blend(RED, CLEAR, BlendMode.SRC_ATOP) == CLEAR

    def test_dst_atop(self):
        assert blend(RED, BLUE, BlendMode.DST_ATOP) == BLUE
        assert blend(RED, CLEAR, BlendMode.DST_ATOP) == RED

    def test_xor(self):
        assert blend(RED, BLUE, BlendMode.XOR) == CLEAR
        assert blend(RED, CLEAR, BlendMode.XOR) == RED

    def test_multiply(self):
        gray = (128, 128, 128, 255)
        b, g, r, a = blend(gray, (255, 255, 255, 255), BlendMode.MULTIPLY)

        assert (b, g, r, a) == gray

    def test_screen(self):
        assert blend(RED, BLUE, BlendMode.SCREEN) == (255, 0, 255, 255)

    def test_darken(self):
        assert blend(RED, BLUE, BlendMode.DARKEN) == (0, 0, 0, 255)

    def test_lighten(self):
        assert blend(RED, BLUE, BlendMode.LIGHTEN) == (255, 0, 255, 255)

    def test_add(self):
        assert blend(RED, BLUE, BlendMode.ADD) == (255, 0, 255, 255)

    def test_overlay_on_white(self):
        white = (255, 255, 255, 255)
        assert blend(RED, white, BlendMode.OVERLAY) == white

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_output_is_uint8_bgra(self, mode):
        result = blend_pixels(make_image(3, 2, HALF_RED), make_image(3, 2, BLUE), mode)

        assert result.shape == (2, 3, 4)
        assert result.dtype == np.uint8


class TestComposite:
    """Tests for composite function."""

    def test_placement(self):
        canvas = make_image(10, 10, CLEAR)
        result = composite(canvas, make_image(4, 4, RED), Rect(x=2, y=3, width=4, height=4))

        assert tuple(result[3, 2]) == RED
        assert tuple(result[6, 5]) == RED
        assert tuple(result[2, 2]) == CLEAR
        assert tuple(result[7, 6]) == CLEAR

    def test_canvas_not_modified(self):
        canvas = make_image(10, 10, CLEAR)
        composite(canvas, make_image(4, 4, RED), Rect(x=0, y=0, width=4, height=4))

        assert not canvas.any()

    def test_scaled_to_rect(self):
        canvas = make_image(20, 20, CLEAR)
        result = composite(canvas, make_image(2, 2, RED), Rect(x=0, y=0, width=10, height=5))

        assert (result[:5, :10, 3] == 255).all()
        assert (result[5:, :, 3] == 0).all()
        assert (result[:, 10:, 3] == 0).all()

    def test_clipped_to_canvas(self):
        canvas = make_image(10, 10, CLEAR)
        result = composite(canvas, make_image(8, 8, RED), Rect(x=6, y=-4, width=8, height=8))

        assert result.shape == (10, 10, 4)
        assert (result[:4, 6:, 3] == 255).all()
        assert (result[4:, :, 3] == 0).all()

    def test_outside_canvas(self):
        canvas = make_image(10, 10, BLUE)
        result = composite(canvas, make_image(4, 4, RED), Rect(x=20, y=20, width=4, height=4))

        np.testing.assert_array_equal(result, canvas)

    def test_mode_only_affects_rect(self):
        canvas = make_image(10, 10, BLUE)
        result = composite(
            canvas, make_image(4, 4, RED), Rect(x=0, y=0, width=4, height=4), BlendMode.CLEAR
        )

        assert tuple(result[0, 0]) == CLEAR
        assert tuple(result[9, 9]) == BLUE
