"""
Image Handler - Applies an ordered list of edit operations to one buffer
"""

import logging
from typing import Callable, Dict, List, Optional

import numpy as np

from common.enums import BlendMode, OperationType
from core.font_cache import FontCache, get_font_cache
from core.image.blending import composite
from core.image.color import apply_color_matrix
from core.image.decoder import decode_full
from core.image.drawing import draw_parts
from core.image.encoder import encode, encode_to_file
from core.image.geometry import crop, flip, relative_rect, rotate, scale
from core.image.text import render_texts
from core.utils.decorators import timer
from schemas.options import (
    AddTextOption,
    ClipOption,
    ClipRelativeOption,
    ColorOption,
    DrawOption,
    FlipOption,
    FormatOption,
    MixImageOption,
    Operation,
    RotateOption,
    ScaleOption,
)

logger = logging.getLogger(__name__)


class ImageHandler:
    """
    Owns the current buffer of one request and folds operations over it.

    Each operation reads the current buffer and yields the next one. When an
    operation returns a new array the previous one is dropped right away, so
    at most two full buffers are alive at any step.
    """

    def __init__(self, buffer: np.ndarray, font_cache: Optional[FontCache] = None):
        self.buffer = buffer
        self.font_cache = font_cache or get_font_cache()

        self._handlers: Dict[OperationType, Callable[[np.ndarray, Operation], np.ndarray]] = {
            OperationType.FLIP: self._flip,
            OperationType.CLIP: self._clip,
            OperationType.CLIP_RELATIVE: self._clip_relative,
            OperationType.ROTATE: self._rotate,
            OperationType.COLOR: self._color,
            OperationType.SCALE: self._scale,
            OperationType.ADD_TEXT: self._add_text,
            OperationType.MIX_IMAGE: self._mix_image,
            OperationType.DRAW: self._draw,
        }

    @property
    def width(self) -> int:
        return self.buffer.shape[1]

    @property
    def height(self) -> int:
        return self.buffer.shape[0]

    def handle(self, options: List[Operation]) -> np.ndarray:
        """
        Apply operations in list order.

        Args:
            options: Operations to apply

        Returns:
            The final buffer

        Raises:
            BoundsError: If a clip rectangle exceeds the current buffer
            DecodeError: If a mixed-in image cannot be decoded
        """
        with timer() as t:
            for option in options:
                op_type = OperationType(option.type)
                result = self._handlers[op_type](self.buffer, option)
                if result is not self.buffer:
                    # Drop the previous buffer before the next step runs
                    self.buffer = result
                logger.debug(f"Applied {op_type.value} -> {self.width}x{self.height}")

        logger.debug(f"Applied {len(options)} operations in {t['ms']}ms")
        return self.buffer

    # === Operations ===

    def _flip(self, buffer: np.ndarray, option: FlipOption) -> np.ndarray:
        return flip(buffer, option.horizontal, option.vertical)

    def _clip(self, buffer: np.ndarray, option: ClipOption) -> np.ndarray:
        return crop(buffer, option.x, option.y, option.width, option.height)

    def _clip_relative(self, buffer: np.ndarray, option: ClipRelativeOption) -> np.ndarray:
        x, y, width, height = relative_rect(
            buffer, option.x, option.y, option.width, option.height
        )
        return crop(buffer, x, y, width, height)

    def _rotate(self, buffer: np.ndarray, option: RotateOption) -> np.ndarray:
        return rotate(buffer, option.angle)

    def _color(self, buffer: np.ndarray, option: ColorOption) -> np.ndarray:
        return apply_color_matrix(buffer, option.matrix)

    def _scale(self, buffer: np.ndarray, option: ScaleOption) -> np.ndarray:
        return scale(buffer, option.width, option.height)

    def _add_text(self, buffer: np.ndarray, option: AddTextOption) -> np.ndarray:
        return render_texts(buffer, option.texts, self.font_cache)

    def _mix_image(self, buffer: np.ndarray, option: MixImageOption) -> np.ndarray:
        overlay = decode_full(option.img)
        return composite(buffer, overlay, option.dest_rect, BlendMode(option.blend_mode))

    def _draw(self, buffer: np.ndarray, option: DrawOption) -> np.ndarray:
        return draw_parts(buffer, option.parts)

    # === Output ===

    def output_bytes(self, fmt: Optional[FormatOption] = None) -> bytes:
        """Encode the current buffer."""
        return encode(self.buffer, fmt)

    def output_to_file(self, path: str, fmt: Optional[FormatOption] = None) -> str:
        """Encode the current buffer to ``path`` and return the path."""
        return encode_to_file(self.buffer, fmt, path)
