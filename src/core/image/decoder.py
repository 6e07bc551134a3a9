"""
Image decoding with bounded memory.

Decoding happens in two passes:
- a header pass (Pillow lazy open) reads the natural size, container format
  and EXIF orientation without materializing pixels;
- a pixel pass (OpenCV) decodes the data and reduces it by a power-of-two
  sample size chosen from the bounding box.
"""

import logging
import os
import struct
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from api.exceptions import DecodeError
from common.constants import EditorConstants
from common.enums import Orientation
from core.image.converters import ensure_bgra
from core.image.orientation import to_orientation

logger = logging.getLogger(__name__)

EXIF_ORIENTATION_TAG = 274

# Orientation is applied as explicit operations, never by the codec.
_IMREAD_FLAGS = cv2.IMREAD_UNCHANGED | cv2.IMREAD_IGNORE_ORIENTATION

# In-codec reduction (scaled IDCT) available for JPEG sources
_REDUCED_COLOR_FLAGS = {
    2: cv2.IMREAD_REDUCED_COLOR_2,
    4: cv2.IMREAD_REDUCED_COLOR_4,
    8: cv2.IMREAD_REDUCED_COLOR_8,
}

Source = Union[str, os.PathLike, bytes]


@dataclass
class ImageHeader:
    """What the header pass knows about a source."""

    width: int
    height: int
    format: Optional[str]
    orientation: Orientation


@dataclass
class DecodedImage:
    """Pixel buffer plus what the decoder learned about the source."""

    buffer: np.ndarray
    orientation: Orientation
    sample_size: int
    natural_width: int
    natural_height: int

    @property
    def width(self) -> int:
        return self.buffer.shape[1]

    @property
    def height(self) -> int:
        return self.buffer.shape[0]


def calculate_in_sample_size(width: int, height: int, req_width: int, req_height: int) -> int:
    """
    Largest power of two that keeps both halved dimensions above the request.

    Args:
        width: Natural width
        height: Natural height
        req_width: Bounding box width
        req_height: Bounding box height

    Returns:
        Sample size (1, 2, 4, ...)
    """
    in_sample_size = 1
    if height > req_height or width > req_width:
        half_height = height // 2
        half_width = width // 2

        while (
            half_height // in_sample_size > req_height
            and half_width // in_sample_size > req_width
        ):
            in_sample_size *= 2

    return in_sample_size


def read_source(source: Optional[Source]) -> bytes:
    """
    Load the encoded bytes of a path or pass a buffer through.

    Raises:
        DecodeError: If no source is given, the buffer is empty or the file is unreadable
    """
    if source is None:
        raise DecodeError("no source given")

    if isinstance(source, (bytes, bytearray, memoryview)):
        if len(source) == 0:
            raise DecodeError("empty buffer")
        return bytes(source)

    path = os.fspath(source)
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise DecodeError(f"cannot read {path}: {e}")


def read_header(data: bytes) -> ImageHeader:
    """
    Read size, format and orientation without decoding pixel data.

    Args:
        data: Encoded image

    Returns:
        ImageHeader

    Raises:
        DecodeError: If the data is not a recognizable image
    """
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
            image_format = img.format
            try:
                tag = img.getexif().get(EXIF_ORIENTATION_TAG)
            except (OSError, ValueError, SyntaxError, struct.error) as e:
                logger.debug(f"Unreadable EXIF block, assuming normal orientation: {e}")
                tag = None
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"unrecognized image data: {e}")

    return ImageHeader(
        width=width, height=height, format=image_format, orientation=to_orientation(tag)
    )


def decode_pixels(
    data: bytes,
    sample_size: int = 1,
    natural_size: Optional[Tuple[int, int]] = None,
    image_format: Optional[str] = None,
) -> np.ndarray:
    """
    Decode pixel data into a BGRA buffer.

    JPEG sources are reduced inside the codec for sample sizes up to 8, so
    the full-resolution raster is never materialized; the remainder (and any
    other format) is reduced with area interpolation.

    Args:
        data: Encoded image
        sample_size: Power-of-two reduction factor
        natural_size: (width, height) from the header pass
        image_format: Container format from the header pass

    Returns:
        BGRA buffer of size ``(width // sample_size, height // sample_size)``

    Raises:
        DecodeError: If the codec cannot parse the data
    """
    flags = _IMREAD_FLAGS
    if sample_size > 1 and image_format == "JPEG":
        codec_factor = max(f for f in _REDUCED_COLOR_FLAGS if f <= sample_size)
        flags = _REDUCED_COLOR_FLAGS[codec_factor] | cv2.IMREAD_IGNORE_ORIENTATION

    image = cv2.imdecode(np.frombuffer(data, np.uint8), flags)
    if image is None:
        raise DecodeError("codec could not parse the data")

    image = ensure_bgra(image)

    if sample_size > 1:
        width, height = natural_size or (image.shape[1], image.shape[0])
        size = (max(1, width // sample_size), max(1, height // sample_size))
        if (image.shape[1], image.shape[0]) != size:
            image = cv2.resize(image, size, interpolation=cv2.INTER_AREA)

    return image


def decode(
    source: Optional[Source],
    bounding_box: Tuple[int, int] = (
        EditorConstants.DEFAULT_DECODE_MAX_WIDTH,
        EditorConstants.DEFAULT_DECODE_MAX_HEIGHT,
    ),
) -> DecodedImage:
    """
    Decode a file path or byte buffer, bounded by ``bounding_box``.

    Args:
        source: Path or encoded bytes
        bounding_box: (max width, max height) used to pick the sample size

    Returns:
        DecodedImage with the BGRA buffer, orientation and sample size

    Raises:
        DecodeError: If the source is absent, unreadable or not an image
    """
    data = read_source(source)

    header = read_header(data)
    sample_size = calculate_in_sample_size(
        header.width, header.height, bounding_box[0], bounding_box[1]
    )
    buffer = decode_pixels(
        data,
        sample_size,
        natural_size=(header.width, header.height),
        image_format=header.format,
    )

    logger.debug(
        f"Decoded {header.format} {header.width}x{header.height} -> "
        f"{buffer.shape[1]}x{buffer.shape[0]} "
        f"(sample size {sample_size}, orientation {header.orientation.name})"
    )

    return DecodedImage(
        buffer=buffer,
        orientation=header.orientation,
        sample_size=sample_size,
        natural_width=header.width,
        natural_height=header.height,
    )


def decode_full(data: bytes) -> np.ndarray:
    """
    Decode encoded bytes at full resolution, ignoring orientation.

    Used for images mixed into another one and for merge sources.

    Raises:
        DecodeError: If the bytes are empty or not an image
    """
    return decode_pixels(read_source(data))
