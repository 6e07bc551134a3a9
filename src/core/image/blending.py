"""
Blend-mode compositing of one BGRA image onto another.

Colors are converted to premultiplied floats in 0..1, combined with the
Porter-Duff (or separable) rule of the chosen mode, and converted back.
Only the destination rectangle is touched; pixels of the destination outside
it are left as they are, whatever the mode.
"""

import logging
from typing import Callable, Dict, Tuple

import cv2
import numpy as np

from common.base import Rect
from common.enums import BlendMode

logger = logging.getLogger(__name__)

# (src color, src alpha, dst color, dst alpha) -> (color, alpha), all premultiplied
BlendFunc = Callable[
    [np.ndarray, np.ndarray, np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]
]


def _union_alpha(sa, da):
    return sa + da - sa * da


def _overlay(sc, sa, dc, da):
    # Separable overlay on premultiplied colors
    low = 2.0 * sc * dc
    high = sa * da - 2.0 * (da - dc) * (sa - sc)
    mixed = np.where(2.0 * dc <= da, low, high)
    return mixed + sc * (1.0 - da) + dc * (1.0 - sa)


BLEND_FUNCTIONS: Dict[BlendMode, BlendFunc] = {
    BlendMode.CLEAR: lambda sc, sa, dc, da: (np.zeros_like(dc), np.zeros_like(da)),
    BlendMode.SRC: lambda sc, sa, dc, da: (sc, sa),
    BlendMode.DST: lambda sc, sa, dc, da: (dc, da),
    BlendMode.SRC_OVER: lambda sc, sa, dc, da: (sc + dc * (1.0 - sa), sa + da * (1.0 - sa)),
    BlendMode.DST_OVER: lambda sc, sa, dc, da: (dc + sc * (1.0 - da), da + sa * (1.0 - da)),
    BlendMode.SRC_IN: lambda sc, sa, dc, da: (sc * da, sa * da),
    BlendMode.DST_IN: lambda sc, sa, dc, da: (dc * sa, da * sa),
    BlendMode.SRC_OUT: lambda sc, sa, dc, da: (sc * (1.0 - da), sa * (1.0 - da)),
    BlendMode.DST_OUT: lambda sc, sa, dc, da: (dc * (1.0 - sa), da * (1.0 - sa)),
    BlendMode.SRC_ATOP: lambda sc, sa, dc, da: (sc * da + dc * (1.0 - sa), da),
    BlendMode.DST_ATOP: lambda sc, sa, dc, da: (dc * sa + sc * (1.0 - da), sa),
    BlendMode.XOR: lambda sc, sa, dc, da: (
        sc * (1.0 - da) + dc * (1.0 - sa),
        sa + da - 2.0 * sa * da,
    ),
    BlendMode.DARKEN: lambda sc, sa, dc, da: (
        sc * (1.0 - da) + dc * (1.0 - sa) + np.minimum(sc * da, dc * sa),
        _union_alpha(sa, da),
    ),
    BlendMode.LIGHTEN: lambda sc, sa, dc, da: (
        sc * (1.0 - da) + dc * (1.0 - sa) + np.maximum(sc * da, dc * sa),
        _union_alpha(sa, da),
    ),
    BlendMode.MULTIPLY: lambda sc, sa, dc, da: (sc * dc, sa * da),
    BlendMode.SCREEN: lambda sc, sa, dc, da: (sc + dc - sc * dc, _union_alpha(sa, da)),
    BlendMode.OVERLAY: lambda sc, sa, dc, da: (_overlay(sc, sa, dc, da), _union_alpha(sa, da)),
    BlendMode.ADD: lambda sc, sa, dc, da: (
        np.minimum(sc + dc, 1.0),
        np.minimum(sa + da, 1.0),
    ),
}


def _premultiply(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    values = pixels.astype(np.float32) / 255.0
    alpha = values[..., 3:4]
    return values[..., :3] * alpha, alpha


def _unpremultiply(color: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    safe_alpha = np.where(alpha > 0, alpha, 1.0)
    straight = np.where(alpha > 0, color / safe_alpha, 0.0)
    out = np.concatenate([straight, alpha], axis=-1)
    return np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)


def blend_pixels(src: np.ndarray, dst: np.ndarray, mode: BlendMode) -> np.ndarray:
    """
    Combine two equally sized BGRA arrays.

    Args:
        src: Source pixels (drawn)
        dst: Destination pixels (drawn onto)
        mode: Blend mode

    Returns:
        Blended BGRA uint8 pixels
    """
    sc, sa = _premultiply(src)
    dc, da = _premultiply(dst)
    color, alpha = BLEND_FUNCTIONS[mode](sc, sa, dc, da)
    return _unpremultiply(color, alpha)


def composite(
    canvas: np.ndarray,
    image: np.ndarray,
    dest: Rect,
    mode: BlendMode = BlendMode.SRC_OVER,
) -> np.ndarray:
    """
    Draw ``image`` scaled into ``dest`` on a copy of ``canvas``.

    The whole source is scaled to the destination rectangle (no source-side
    cropping); the part of the rectangle outside the canvas is discarded.

    Args:
        canvas: Destination BGRA buffer (not modified)
        image: Source BGRA buffer
        dest: Destination rectangle in canvas pixels
        mode: Blend mode

    Returns:
        New BGRA buffer
    """
    result = canvas.copy()
    canvas_height, canvas_width = canvas.shape[:2]

    visible = dest.clip(canvas_width, canvas_height)
    if visible is None:
        logger.debug(f"Destination {dest.to_dict()} lies outside the canvas, nothing to draw")
        return result

    if (image.shape[1], image.shape[0]) != (dest.width, dest.height):
        interpolation = (
            cv2.INTER_AREA
            if dest.width < image.shape[1] and dest.height < image.shape[0]
            else cv2.INTER_LINEAR
        )
        image = cv2.resize(image, (dest.width, dest.height), interpolation=interpolation)

    # Part of the scaled source that lands on the canvas
    sx, sy = visible.x - dest.x, visible.y - dest.y
    src = image[sy : sy + visible.height, sx : sx + visible.width]
    dst = result[visible.y : visible.y2, visible.x : visible.x2]

    result[visible.y : visible.y2, visible.x : visible.x2] = blend_pixels(src, dst, mode)
    return result
