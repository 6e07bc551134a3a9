"""
Centralized enums for the image editor.

This module contains all enumeration types used throughout the system,
providing a single source of truth for enum definitions.
"""

from enum import Enum, IntEnum


class OutputFormat(IntEnum):
    """Encoded output format (wire values match the channel protocol)."""

    PNG = 0
    JPEG = 1


class Orientation(IntEnum):
    """EXIF orientation tag values (tag 274)."""

    UNDEFINED = 0
    NORMAL = 1
    FLIP_HORIZONTAL = 2
    ROTATE_180 = 3
    FLIP_VERTICAL = 4
    TRANSPOSE = 5
    ROTATE_90 = 6
    TRANSVERSE = 7
    ROTATE_270 = 8


class BlendMode(str, Enum):
    """Compositing modes for mixing one image onto another."""

    CLEAR = "clear"
    SRC = "src"
    DST = "dst"
    SRC_OVER = "srcOver"
    DST_OVER = "dstOver"
    SRC_IN = "srcIn"
    DST_IN = "dstIn"
    SRC_OUT = "srcOut"
    DST_OUT = "dstOut"
    SRC_ATOP = "srcATop"
    DST_ATOP = "dstATop"
    XOR = "xor"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    ADD = "add"


class OperationType(str, Enum):
    """Edit operation kinds, keyed by the ``type`` field of an option map."""

    FLIP = "flip"
    CLIP = "clip"
    CLIP_RELATIVE = "clip_relative"
    ROTATE = "rotate"
    COLOR = "color"
    SCALE = "scale"
    ADD_TEXT = "add_text"
    MIX_IMAGE = "mix_image"
    DRAW = "draw"


class PaintStyle(str, Enum):
    """Whether a primitive is filled or stroked."""

    FILL = "fill"
    STROKE = "stroke"


class ResultStatus(str, Enum):
    """Outcome of a method channel call."""

    SUCCESS = "success"
    ERROR = "error"
    NOT_IMPLEMENTED = "not_implemented"
