"""
Edit operation and output format schemas.

Every operation is a record decoded from a key/value map whose ``type`` key
selects the variant. The set is closed: ``Operation`` is a discriminated
union, so an unknown ``type`` fails validation of the whole request.
"""

from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BeforeValidator, Field, TypeAdapter, field_validator

from common.base import Point, Rect
from common.constants import EditorConstants
from common.enums import BlendMode, OutputFormat, PaintStyle
from core.utils.enum_converter import parse_enum
from schemas.base import OptionModel, decode_image_bytes

ImageBytes = Annotated[bytes, BeforeValidator(decode_image_bytes)]


def _parse_blend_mode(value):
    return parse_enum(value, BlendMode, BlendMode.SRC_OVER, normalize=True)


class FormatOption(OptionModel):
    """Output encoding: PNG (lossless) or JPEG at a quality level."""

    format: OutputFormat = Field(default=OutputFormat.PNG, description="0 = PNG, 1 = JPEG")
    quality: int = Field(
        default=EditorConstants.DEFAULT_QUALITY,
        ge=EditorConstants.MIN_QUALITY,
        le=EditorConstants.MAX_QUALITY,
        description="JPEG quality; a compression-effort hint for PNG",
    )

    @property
    def extension(self) -> str:
        if self.format == OutputFormat.JPEG:
            return EditorConstants.JPEG_EXTENSION
        return EditorConstants.PNG_EXTENSION


# === Geometric operations ===


class FlipOption(OptionModel):
    """Mirror the buffer horizontally and/or vertically."""

    type: Literal["flip"] = "flip"
    horizontal: bool = Field(default=False, alias="h")
    vertical: bool = Field(default=False, alias="v")

    @property
    def is_identity(self) -> bool:
        return not (self.horizontal or self.vertical)


class ClipOption(OptionModel):
    """Crop to an absolute pixel rectangle."""

    type: Literal["clip"] = "clip"
    x: int
    y: int
    width: int
    height: int


class ClipRelativeOption(OptionModel):
    """Crop to a rectangle given as fractions of the current size."""

    type: Literal["clip_relative"] = "clip_relative"
    x: float
    y: float
    width: float
    height: float


class RotateOption(OptionModel):
    """Rotate clockwise by ``degree`` about the center, growing the canvas to fit."""

    type: Literal["rotate"] = "rotate"
    angle: float = Field(..., alias="degree")


class ScaleOption(OptionModel):
    """Shrink to at most ``width`` x ``height`` (never enlarges)."""

    type: Literal["scale"] = "scale"
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)


class ColorOption(OptionModel):
    """
    4x5 color matrix, row-major, in RGBA order.

    Rows produce R', G', B', A'; the fifth column is an additive offset in
    0..255 channel space.
    """

    type: Literal["color"] = "color"
    matrix: List[float]

    @field_validator("matrix")
    @classmethod
    def validate_matrix(cls, v):
        """Ensure the matrix has 4 rows of 5 coefficients."""
        if len(v) != 20:
            raise ValueError(f"Color matrix needs 20 values, got {len(v)}")
        return v


# === Overlay operations ===


class TextItem(OptionModel):
    """One block of text, word-wrapped from (x, y) to the right edge."""

    text: str
    x: int
    y: int
    font_size_px: int = Field(
        default=EditorConstants.DEFAULT_FONT_SIZE_PX, alias="fontSizePx", ge=1
    )
    r: int = Field(default=0, ge=0, le=255)
    g: int = Field(default=0, ge=0, le=255)
    b: int = Field(default=0, ge=0, le=255)
    a: int = Field(default=255, ge=0, le=255)
    font_name: str = Field(default="", alias="fontName")

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


class AddTextOption(OptionModel):
    """Render texts in list order; later entries draw over earlier ones."""

    type: Literal["add_text"] = "add_text"
    texts: List[TextItem] = Field(default_factory=list)


class MixImageOption(OptionModel):
    """Composite a second encoded image into a destination rectangle."""

    type: Literal["mix_image"] = "mix_image"
    img: ImageBytes
    x: int
    y: int
    w: int
    h: int
    blend_mode: Annotated[BlendMode, BeforeValidator(_parse_blend_mode)] = Field(
        default=BlendMode.SRC_OVER, alias="mixMode"
    )

    @property
    def dest_rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.w, height=self.h)


# === Drawing primitives ===


class Paint(OptionModel):
    """Color and stroke settings for a drawing primitive."""

    color: List[int] = Field(default_factory=lambda: [0, 0, 0, 255], description="[r, g, b, a]")
    line_weight: int = Field(
        default=EditorConstants.DEFAULT_LINE_WEIGHT, alias="lineWeight", ge=1
    )
    paint_style: PaintStyle = Field(default=PaintStyle.STROKE, alias="paintStyle")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        """Accept [r, g, b] or [r, g, b, a] with 8-bit channels."""
        if len(v) == 3:
            v = list(v) + [255]
        if len(v) != 4 or any(c < 0 or c > 255 for c in v):
            raise ValueError(f"Paint color must be 3 or 4 values in 0..255, got {v}")
        return v

    @property
    def filled(self) -> bool:
        return self.paint_style == PaintStyle.FILL


class LinePart(OptionModel):
    key: Literal["line"] = "line"
    start: Point
    end: Point
    paint: Paint = Field(default_factory=Paint)


class RectPart(OptionModel):
    key: Literal["rect"] = "rect"
    rect: Rect
    paint: Paint = Field(default_factory=Paint)


class OvalPart(OptionModel):
    key: Literal["oval"] = "oval"
    rect: Rect
    paint: Paint = Field(default_factory=Paint)


class PointsPart(OptionModel):
    key: Literal["points"] = "points"
    points: List[Point] = Field(default_factory=list)
    paint: Paint = Field(default_factory=Paint)


class MoveSegment(OptionModel):
    type: Literal["move"] = "move"
    offset: Point


class LineSegment(OptionModel):
    type: Literal["lineTo"] = "lineTo"
    offset: Point


class Bezier2Segment(OptionModel):
    type: Literal["bezier2"] = "bezier2"
    target: Point
    control1: Point


class Bezier3Segment(OptionModel):
    type: Literal["bezier3"] = "bezier3"
    target: Point
    control1: Point
    control2: Point


PathSegment = Annotated[
    Union[MoveSegment, LineSegment, Bezier2Segment, Bezier3Segment],
    Field(discriminator="type"),
]


class PathPart(OptionModel):
    key: Literal["path"] = "path"
    parts: List[PathSegment] = Field(default_factory=list)
    auto_close: bool = Field(default=False, alias="autoClose")
    paint: Paint = Field(default_factory=Paint)


DrawPart = Annotated[
    Union[LinePart, RectPart, OvalPart, PointsPart, PathPart],
    Field(discriminator="key"),
]


class DrawOption(OptionModel):
    """Draw primitives in list order."""

    type: Literal["draw"] = "draw"
    parts: List[DrawPart] = Field(default_factory=list)


Operation = Annotated[
    Union[
        FlipOption,
        ClipOption,
        ClipRelativeOption,
        RotateOption,
        ColorOption,
        ScaleOption,
        AddTextOption,
        MixImageOption,
        DrawOption,
    ],
    Field(discriminator="type"),
]

_operations_adapter = TypeAdapter(List[Operation])


def parse_operations(raw: Optional[list]) -> List[Operation]:
    """
    Decode a list of option maps into typed operations.

    Raises:
        pydantic.ValidationError: If any entry is malformed or of unknown type
    """
    return _operations_adapter.validate_python(raw or [])


# === Merge ===


class MergeImage(OptionModel):
    """One source of a merge: encoded bytes placed into a rectangle."""

    src: ImageBytes
    position: Rect
    blend_mode: Annotated[BlendMode, BeforeValidator(_parse_blend_mode)] = Field(
        default=BlendMode.SRC_OVER, alias="mixMode"
    )


class MergeOption(OptionModel):
    """Merge-only pipeline: sources composited onto a ``w`` x ``h`` canvas."""

    images: List[MergeImage] = Field(default_factory=list)
    width: int = Field(..., alias="w")
    height: int = Field(..., alias="h")
    fmt: FormatOption = Field(default_factory=FormatOption)
