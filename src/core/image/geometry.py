"""
Geometric transforms on BGRA pixel buffers.

Handles geometric operations:
- Flip (mirror) over either or both axes
- Crop to absolute or relative rectangles
- Rotation about the center with the canvas grown to the rotated bounds
- Shrink-only scaling

Each function returns a new buffer, or the input itself when the operation
is a no-op.
"""

import logging
import math
from typing import Tuple

import cv2
import numpy as np

from api.exceptions import BoundsError, ErrorMessages

logger = logging.getLogger(__name__)

# Exact quarter-turn rotations (clockwise, y axis pointing down)
_QUARTER_TURNS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def flip(image: np.ndarray, horizontal: bool, vertical: bool) -> np.ndarray:
    """
    Mirror the image.

    Args:
        image: BGRA buffer
        horizontal: Mirror left/right
        vertical: Mirror top/bottom

    Returns:
        Mirrored copy, or the input itself when neither axis is set
    """
    if horizontal and vertical:
        return cv2.flip(image, -1)
    if horizontal:
        return cv2.flip(image, 1)
    if vertical:
        return cv2.flip(image, 0)
    return image


def crop(image: np.ndarray, x: int, y: int, width: int, height: int) -> np.ndarray:
    """
    Copy out a rectangle of the image.

    Args:
        image: BGRA buffer
        x: Left edge
        y: Top edge
        width: Rectangle width
        height: Rectangle height

    Returns:
        Cropped copy of size ``width`` x ``height``

    Raises:
        BoundsError: If the rectangle is empty or reaches outside the image
    """
    img_height, img_width = image.shape[:2]
    rect = {"x": x, "y": y, "width": width, "height": height}
    bounds = {"width": img_width, "height": img_height}

    if x < 0 or y < 0:
        raise BoundsError(ErrorMessages.CLIP_NEGATIVE_ORIGIN.format(x=x, y=y), rect, bounds)
    if width <= 0 or height <= 0:
        raise BoundsError(
            ErrorMessages.CLIP_EMPTY.format(width=width, height=height), rect, bounds
        )
    if x + width > img_width:
        raise BoundsError(
            ErrorMessages.CLIP_OUT_OF_BOUNDS.format(x2=x + width, width=img_width), rect, bounds
        )
    if y + height > img_height:
        raise BoundsError(
            ErrorMessages.CLIP_OUT_OF_BOUNDS_Y.format(y2=y + height, height=img_height),
            rect,
            bounds,
        )

    return image[y : y + height, x : x + width].copy()


def relative_rect(
    image: np.ndarray, x: float, y: float, width: float, height: float
) -> Tuple[int, int, int, int]:
    """
    Convert a fractional rectangle to pixels of the current image.

    Each fraction is multiplied by its own dimension and rounded; no
    relation between the fields (such as ``x + width <= 1``) is enforced.

    Returns:
        Tuple of (x, y, width, height) in pixels
    """
    img_height, img_width = image.shape[:2]
    return (
        _round_half_up(x * img_width),
        _round_half_up(y * img_height),
        _round_half_up(width * img_width),
        _round_half_up(height * img_height),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rotated_bounds(width: int, height: int, angle: float) -> Tuple[int, int]:
    """
    Size of the canvas that holds a ``width`` x ``height`` image rotated by ``angle``.

    Args:
        width: Source width
        height: Source height
        angle: Rotation in degrees

    Returns:
        Tuple of (width, height)
    """
    radians = math.radians(angle)
    cos_a = abs(math.cos(radians))
    sin_a = abs(math.sin(radians))
    new_width = int(round(width * cos_a + height * sin_a))
    new_height = int(round(width * sin_a + height * cos_a))
    return max(1, new_width), max(1, new_height)


def rotate(image: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate clockwise about the center, growing the canvas to fit.

    Quarter turns are exact pixel permutations; other angles are resampled
    bilinearly and the uncovered corners are transparent.

    Args:
        image: BGRA buffer
        angle: Clockwise rotation in degrees

    Returns:
        Rotated buffer, or the input itself for multiples of 360
    """
    normalized = angle % 360
    if normalized == 0:
        return image

    if normalized in _QUARTER_TURNS:
        return cv2.rotate(image, _QUARTER_TURNS[int(normalized)])

    height, width = image.shape[:2]
    new_width, new_height = rotated_bounds(width, height, normalized)

    # OpenCV angles are counter-clockwise
    center = (width / 2.0, height / 2.0)
    matrix = cv2.getRotationMatrix2D(center, -normalized, 1.0)

    # Shift so the rotated content is centered in the grown canvas
    matrix[0, 2] += new_width / 2.0 - center[0]
    matrix[1, 2] += new_height / 2.0 - center[1]

    logger.debug(f"Rotating {width}x{height} by {angle} -> {new_width}x{new_height}")

    return cv2.warpAffine(
        image,
        matrix,
        (new_width, new_height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(0, 0, 0, 0),
    )


def scale(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize to at most ``width`` x ``height``.

    Each target dimension is clamped to the current one independently, so
    this only ever shrinks; aspect ratio is not preserved.

    Args:
        image: BGRA buffer
        width: Requested width
        height: Requested height

    Returns:
        Resized buffer, or the input itself when the clamped size is unchanged
    """
    img_height, img_width = image.shape[:2]
    target_width = min(img_width, width)
    target_height = min(img_height, height)

    if (target_width, target_height) == (img_width, img_height):
        return image

    return cv2.resize(image, (target_width, target_height), interpolation=cv2.INTER_AREA)
