"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization
of channel payloads, organized by concern:
- options: edit operations, drawing primitives, output and merge options
- requests: method channel arguments and results
"""

from common.enums import BlendMode, OperationType, OutputFormat, ResultStatus

from .base import OptionModel, decode_image_bytes
from .options import (
    AddTextOption,
    ClipOption,
    ClipRelativeOption,
    ColorOption,
    DrawOption,
    FlipOption,
    FormatOption,
    LinePart,
    MergeImage,
    MergeOption,
    MixImageOption,
    Operation,
    OvalPart,
    Paint,
    PathPart,
    PointsPart,
    RectPart,
    RotateOption,
    ScaleOption,
    TextItem,
    parse_operations,
)
from .requests import EditRequest, MergeRequest, MethodResult, RegisterFontRequest

__all__ = [
    # Enums
    "BlendMode",
    "OperationType",
    "OutputFormat",
    "ResultStatus",
    # Base
    "OptionModel",
    "decode_image_bytes",
    # Operations
    "AddTextOption",
    "ClipOption",
    "ClipRelativeOption",
    "ColorOption",
    "DrawOption",
    "FlipOption",
    "MixImageOption",
    "Operation",
    "RotateOption",
    "ScaleOption",
    "TextItem",
    "parse_operations",
    # Drawing
    "LinePart",
    "OvalPart",
    "Paint",
    "PathPart",
    "PointsPart",
    "RectPart",
    # Output / merge
    "FormatOption",
    "MergeImage",
    "MergeOption",
    # Requests
    "EditRequest",
    "MergeRequest",
    "MethodResult",
    "RegisterFontRequest",
]
