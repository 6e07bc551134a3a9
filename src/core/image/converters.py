"""
Pixel buffer conversion utilities.

Every stage of the editor works on one layout: an ``(height, width, 4)``
``uint8`` NumPy array in OpenCV's BGRA channel order. This module converts
decoder output into that layout and bridges to Pillow (RGBA) for text
rendering.
"""

import logging

import cv2
import numpy as np
from PIL import Image

from common.constants import Colors, EditorConstants

logger = logging.getLogger(__name__)


def ensure_bgra(image: np.ndarray) -> np.ndarray:
    """
    Convert a decoded image to 8-bit BGRA.

    Args:
        image: Grayscale, BGR or BGRA image of any OpenCV depth

    Returns:
        BGRA uint8 image (the input itself if already in that layout)
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    if channels == EditorConstants.CHANNELS:
        return image

    raise ValueError(f"Unsupported channel count: {channels}")


def ensure_bgr(image: np.ndarray) -> np.ndarray:
    """
    Drop the alpha channel (for encoders without alpha support).

    Args:
        image: BGRA image

    Returns:
        BGR image
    """
    if image.ndim == 3 and image.shape[2] == EditorConstants.CHANNELS:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def new_canvas(width: int, height: int, color=Colors.TRANSPARENT) -> np.ndarray:
    """
    Allocate a blank BGRA canvas.

    Args:
        width: Canvas width in pixels
        height: Canvas height in pixels
        color: Fill color in BGRA order

    Returns:
        Canvas filled with ``color``
    """
    canvas = np.zeros((height, width, EditorConstants.CHANNELS), dtype=np.uint8)
    if any(color):
        canvas[:] = color
    return canvas


def to_pil(image: np.ndarray) -> Image.Image:
    """Convert a BGRA buffer to a Pillow RGBA image."""
    return Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA))


def from_pil(image: Image.Image) -> np.ndarray:
    """Convert a Pillow image to a BGRA buffer."""
    rgba = np.asarray(image.convert("RGBA"))
    return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
