"""
Types package - fundamental types without external dependencies.

This package contains basic types that are used throughout the system:
- Enums (BlendMode, Orientation, OutputFormat, etc.)
- Constants (EditorConstants, WorkerConstants, etc.)
- Base models (Point, Rect)

IMPORTANT: This package must NOT import from any other project packages
(schemas, core, services, api) to avoid circular dependencies.
"""

# Export base models
from common.base import Point, Rect

# Export all constants
from common.constants import (
    APIConstants,
    Colors,
    EditorConstants,
    SystemConstants,
    WorkerConstants,
)

# Export all enums
from common.enums import (
    BlendMode,
    OperationType,
    Orientation,
    OutputFormat,
    PaintStyle,
    ResultStatus,
)

__all__ = [
    # Enums
    "BlendMode",
    "OperationType",
    "Orientation",
    "OutputFormat",
    "PaintStyle",
    "ResultStatus",
    # Constants
    "APIConstants",
    "Colors",
    "EditorConstants",
    "SystemConstants",
    "WorkerConstants",
    # Base models
    "Point",
    "Rect",
]
