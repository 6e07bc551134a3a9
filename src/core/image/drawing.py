"""
Vector primitive drawing.

Each part is rasterized as an anti-aliased coverage mask with OpenCV, turned
into a layer of the part's paint color and composited source-over onto the
image. Parts are drawn in list order.
"""

import logging
from typing import List, Sequence, Tuple

import cv2
import numpy as np

from common.constants import EditorConstants
from common.enums import BlendMode
from core.image.blending import blend_pixels
from schemas.options import (
    Bezier2Segment,
    Bezier3Segment,
    LinePart,
    LineSegment,
    MoveSegment,
    OvalPart,
    Paint,
    PathPart,
    PointsPart,
    RectPart,
)

logger = logging.getLogger(__name__)

DEFAULT_LINE_TYPE = cv2.LINE_AA
FILLED = -1


def _thickness(paint: Paint) -> int:
    return FILLED if paint.filled else paint.line_weight


def draw_line(mask: np.ndarray, part: LinePart) -> None:
    cv2.line(
        mask,
        part.start.as_int(),
        part.end.as_int(),
        255,
        part.paint.line_weight,
        DEFAULT_LINE_TYPE,
    )


def draw_rect(mask: np.ndarray, part: RectPart) -> None:
    rect = part.rect
    cv2.rectangle(
        mask,
        (rect.x, rect.y),
        (rect.x2, rect.y2),
        255,
        _thickness(part.paint),
        DEFAULT_LINE_TYPE,
    )


def draw_oval(mask: np.ndarray, part: OvalPart) -> None:
    """Ellipse inscribed in the part's rectangle."""
    rect = part.rect
    center = (rect.x + rect.width // 2, rect.y + rect.height // 2)
    axes = (max(0, rect.width // 2), max(0, rect.height // 2))
    cv2.ellipse(mask, center, axes, 0, 0, 360, 255, _thickness(part.paint), DEFAULT_LINE_TYPE)


def draw_points(mask: np.ndarray, part: PointsPart) -> None:
    """Each point is a dot whose diameter is the line weight."""
    radius = max(1, part.paint.line_weight // 2)
    for point in part.points:
        cv2.circle(mask, point.as_int(), radius, 255, FILLED, DEFAULT_LINE_TYPE)


def _quadratic(p0, p1, p2, segments: int) -> List[Tuple[float, float]]:
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    curve = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t**2 * p2
    return [tuple(p) for p in curve]


def _cubic(p0, p1, p2, p3, segments: int) -> List[Tuple[float, float]]:
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    curve = (
        (1 - t) ** 3 * p0
        + 3 * (1 - t) ** 2 * t * p1
        + 3 * (1 - t) * t**2 * p2
        + t**3 * p3
    )
    return [tuple(p) for p in curve]


def flatten_path(part: PathPart, segments: int = EditorConstants.BEZIER_SEGMENTS) -> List[np.ndarray]:
    """
    Convert path segments to polylines.

    A move starts a new subpath; curves are sampled into ``segments`` line
    pieces. Drawing starts at the origin when the path does not begin with a
    move.

    Returns:
        One int32 array of shape (n, 2) per subpath with at least two points
    """
    subpaths: List[List[Tuple[float, float]]] = []
    current: List[Tuple[float, float]] = [(0.0, 0.0)]

    for segment in part.parts:
        last = np.array(current[-1])
        if isinstance(segment, MoveSegment):
            subpaths.append(current)
            current = [(segment.offset.x, segment.offset.y)]
        elif isinstance(segment, LineSegment):
            current.append((segment.offset.x, segment.offset.y))
        elif isinstance(segment, Bezier2Segment):
            current.extend(
                _quadratic(
                    last,
                    np.array([segment.control1.x, segment.control1.y]),
                    np.array([segment.target.x, segment.target.y]),
                    segments,
                )
            )
        elif isinstance(segment, Bezier3Segment):
            current.extend(
                _cubic(
                    last,
                    np.array([segment.control1.x, segment.control1.y]),
                    np.array([segment.control2.x, segment.control2.y]),
                    np.array([segment.target.x, segment.target.y]),
                    segments,
                )
            )
    subpaths.append(current)

    return [
        np.round(np.array(points)).astype(np.int32).reshape(-1, 2)
        for points in subpaths
        if len(points) >= 2
    ]


def draw_path(mask: np.ndarray, part: PathPart) -> None:
    polylines = flatten_path(part)
    if not polylines:
        return
    if part.paint.filled:
        cv2.fillPoly(mask, polylines, 255, DEFAULT_LINE_TYPE)
    else:
        cv2.polylines(
            mask, polylines, part.auto_close, 255, part.paint.line_weight, DEFAULT_LINE_TYPE
        )


_DRAWERS = {
    LinePart: draw_line,
    RectPart: draw_rect,
    OvalPart: draw_oval,
    PointsPart: draw_points,
    PathPart: draw_path,
}


def paint_layer(mask: np.ndarray, paint: Paint) -> np.ndarray:
    """Solid BGRA layer of the paint color with alpha scaled by ``mask`` coverage."""
    r, g, b, a = paint.color
    layer = np.empty(mask.shape + (EditorConstants.CHANNELS,), dtype=np.uint8)
    layer[..., 0] = b
    layer[..., 1] = g
    layer[..., 2] = r
    layer[..., 3] = (mask.astype(np.uint16) * a // 255).astype(np.uint8)
    return layer


def draw_parts(image: np.ndarray, parts: Sequence) -> np.ndarray:
    """
    Draw primitives onto a copy of a BGRA buffer.

    Args:
        image: BGRA buffer
        parts: Drawing parts in order

    Returns:
        New BGRA buffer of the same size
    """
    result = image.copy()
    for part in parts:
        mask = np.zeros(image.shape[:2], dtype=np.uint8)
        _DRAWERS[type(part)](mask, part)
        if not mask.any():
            continue
        result = blend_pixels(paint_layer(mask, part.paint), result, BlendMode.SRC_OVER)
    logger.debug(f"Drew {len(parts)} parts")
    return result
