"""
Tests for core.image.decoder module.

Tests sample size selection, header reading, orientation detection and
bounded decoding from paths and byte buffers.
"""

import struct
from unittest.mock import patch

import numpy as np
import pytest
from PIL import PngImagePlugin

from api.exceptions import DecodeError
from common.enums import Orientation
from core.image.decoder import (
    calculate_in_sample_size,
    decode,
    decode_full,
    decode_pixels,
    read_header,
    read_source,
)
from image_helpers import encode_jpeg, encode_png, jpeg_with_orientation, make_image


class TestCalculateInSampleSize:
    """Tests for calculate_in_sample_size function."""

    def test_within_bounds(self):
        """Sources inside the bounding box are not reduced."""
        assert calculate_in_sample_size(640, 480, 700, 700) == 1

    def test_exactly_bounds(self):
        assert calculate_in_sample_size(700, 700, 700, 700) == 1

    def test_slightly_larger(self):
        """Halved dimensions below the box keep a factor of 1."""
        assert calculate_in_sample_size(1200, 1200, 700, 700) == 1

    def test_more_than_double(self):
        """Both halves above the box doubles the factor."""
        assert calculate_in_sample_size(1500, 1500, 700, 700) == 2

    def test_large_source(self):
        assert calculate_in_sample_size(4000, 3000, 700, 700) == 4

    def test_one_small_dimension_stops_doubling(self):
        """Doubling continues only while both halves exceed the box."""
        assert calculate_in_sample_size(8000, 800, 700, 700) == 1

    def test_power_of_two(self):
        size = calculate_in_sample_size(20000, 15000, 700, 700)
        assert size & (size - 1) == 0
        assert size >= 2


class TestReadSource:
    """Tests for read_source function."""

    def test_none(self):
        with pytest.raises(DecodeError):
            read_source(None)

    def test_empty_bytes(self):
        with pytest.raises(DecodeError):
            read_source(b"")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DecodeError):
            read_source(str(tmp_path / "missing.png"))

    def test_bytes_passthrough(self):
        assert read_source(b"abc") == b"abc"

    def test_file(self, red_png_file, red_png_bytes):
        assert read_source(red_png_file) == red_png_bytes


class TestReadHeader:
    """Tests for read_header function."""

    def test_png_header(self, wide_png_bytes):
        header = read_header(wide_png_bytes)

        assert header.width == 200
        assert header.height == 100
        assert header.format == "PNG"
        assert header.orientation == Orientation.NORMAL

    def test_exif_orientation(self):
        header = read_header(jpeg_with_orientation(40, 20, 6))

        assert header.format == "JPEG"
        assert header.orientation == Orientation.ROTATE_90

    def test_not_an_image(self):
        with pytest.raises(DecodeError):
            read_header(b"definitely not an image")

    @pytest.mark.parametrize(
        "error", [struct.error("unpack"), SyntaxError("bad ifd"), OSError("truncated")]
    )
    def test_unreadable_exif_is_normal(self, wide_png_bytes, error):
        with patch.object(PngImagePlugin.PngImageFile, "getexif", side_effect=error):
            header = read_header(wide_png_bytes)

        assert header.width == 200
        assert header.orientation == Orientation.NORMAL

    def test_unexpected_exif_error_propagates(self, wide_png_bytes):
        with patch.object(PngImagePlugin.PngImageFile, "getexif", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                read_header(wide_png_bytes)


class TestDecode:
    """Tests for decode function."""

    def test_decode_bytes(self, red_png_bytes):
        decoded = decode(red_png_bytes)

        assert decoded.buffer.shape == (100, 100, 4)
        assert decoded.buffer.dtype == np.uint8
        assert decoded.sample_size == 1
        assert decoded.orientation == Orientation.NORMAL

    def test_decode_path(self, red_png_file):
        decoded = decode(red_png_file)

        assert decoded.width == 100
        assert decoded.height == 100

    def test_pixels_are_bgra(self, red_png_bytes):
        decoded = decode(red_png_bytes)

        assert tuple(decoded.buffer[50, 50]) == (0, 0, 255, 255)

    def test_grayscale_converted(self):
        gray = np.full((10, 12), 77, dtype=np.uint8)
        decoded = decode(encode_png(gray))

        assert decoded.buffer.shape == (10, 12, 4)
        assert tuple(decoded.buffer[0, 0]) == (77, 77, 77, 255)

    def test_alpha_preserved(self):
        image = make_image(8, 8, (10, 20, 30, 40))
        decoded = decode(encode_png(image))

        assert tuple(decoded.buffer[4, 4]) == (10, 20, 30, 40)

    def test_large_png_downsampled(self):
        """Longest edge over twice the box yields a factor of at least 2."""
        data = encode_png(make_image(300, 300))
        decoded = decode(data, bounding_box=(100, 100))

        assert decoded.sample_size >= 2
        assert decoded.width == 300 // decoded.sample_size
        assert decoded.height == 300 // decoded.sample_size
        assert decoded.natural_width == 300

    def test_large_jpeg_downsampled(self):
        data = encode_jpeg(make_image(400, 320))
        decoded = decode(data, bounding_box=(100, 100))

        assert decoded.sample_size == 2
        assert decoded.buffer.shape == (160, 200, 4)

    def test_orientation_reported(self):
        decoded = decode(jpeg_with_orientation(40, 20, 3))

        assert decoded.orientation == Orientation.ROTATE_180
        # Pixels are not rotated by the decoder
        assert decoded.width == 40
        assert decoded.height == 20

    def test_no_source(self):
        with pytest.raises(DecodeError) as exc_info:
            decode(None)

        assert exc_info.value.message == "decode bitmap error"

    def test_corrupt_bytes(self):
        with pytest.raises(DecodeError):
            decode(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)


class TestDecodeFull:
    """Tests for decode_full and decode_pixels functions."""

    def test_full_resolution(self):
        data = encode_png(make_image(1600, 1600))
        buffer = decode_full(data)

        assert buffer.shape == (1600, 1600, 4)

    def test_empty(self):
        with pytest.raises(DecodeError):
            decode_full(b"")

    def test_decode_pixels_resizes_to_factor(self):
        data = encode_png(make_image(101, 51))
        buffer = decode_pixels(data, sample_size=2, natural_size=(101, 51), image_format="PNG")

        assert buffer.shape == (25, 50, 4)
