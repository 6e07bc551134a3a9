"""
Text overlay rendering.

Each text block is word-wrapped to the width between its x position and the
right edge of the canvas, left-aligned with single line spacing, and drawn
with Pillow onto a transparent layer that is composited source-over onto the
image. Blocks are drawn in list order, so later blocks cover earlier ones.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Sequence

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from api.exceptions import EditorException
from common.constants import EditorConstants
from core.font_cache import FontCache, get_font_cache
from core.image.converters import from_pil, to_pil
from schemas.options import TextItem

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def default_font(size: int):
    """Pillow's built-in font at ``size`` pixels."""
    return ImageFont.load_default(size=size)


def resolve_font(item: TextItem, font_cache: Optional[FontCache] = None):
    """
    Font for a text block.

    A named font comes from the font cache; an empty name, or any failure to
    obtain the named font, gives the default font instead.
    """
    if not item.font_name:
        return default_font(item.font_size_px)

    cache = font_cache or get_font_cache()
    try:
        return cache.get_font(item.font_name, item.font_size_px)
    except (EditorException, OSError, ValueError) as e:
        logger.debug(f"Font '{item.font_name}' unavailable, using default font: {e}")
        return default_font(item.font_size_px)


def line_height(font) -> int:
    """Height of one line of text in pixels."""
    if hasattr(font, "getmetrics"):
        ascent, descent = font.getmetrics()
        height = ascent + descent
    else:
        left, top, right, bottom = font.getbbox("Ag")
        height = bottom - top
    return max(1, int(round(height * EditorConstants.LINE_SPACING_MULTIPLIER)))


def _break_word(word: str, font, max_width: int) -> List[str]:
    # Split a word wider than the line at character boundaries
    pieces = []
    current = ""
    for char in word:
        if current and font.getlength(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, font, max_width: int) -> List[str]:
    """
    Greedy word wrap.

    Explicit newlines always start a new line. Words that do not fit on an
    empty line are broken between characters.

    Args:
        text: Text to lay out
        font: Pillow font used for measuring
        max_width: Available width in pixels

    Returns:
        Lines in drawing order
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if font.getlength(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
            if font.getlength(word) <= max_width:
                current = word
            else:
                *full, current = _break_word(word, font, max_width) or [""]
                lines.extend(full)
        lines.append(current)
    return lines


def draw_text(layer: Image.Image, item: TextItem, font) -> None:
    """Draw one wrapped text block onto an RGBA layer."""
    max_width = layer.width - item.x
    if max_width <= 0:
        logger.debug(f"Text at x={item.x} starts past the right edge, skipped")
        return

    draw = ImageDraw.Draw(layer)
    step = line_height(font) + EditorConstants.LINE_SPACING_EXTRA
    for index, line in enumerate(wrap_text(item.text, font, max_width)):
        if line:
            draw.text((item.x, item.y + index * step), line, font=font, fill=item.rgba)


def render_texts(
    image: np.ndarray,
    texts: Sequence[TextItem],
    font_cache: Optional[FontCache] = None,
) -> np.ndarray:
    """
    Render text blocks onto a copy of a BGRA buffer.

    Args:
        image: BGRA buffer
        texts: Text blocks in drawing order
        font_cache: Font registry (defaults to the process-wide one)

    Returns:
        New BGRA buffer of the same size
    """
    canvas = to_pil(image)
    for item in texts:
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw_text(layer, item, resolve_font(item, font_cache))
        canvas = Image.alpha_composite(canvas, layer)
    return from_pil(canvas)
