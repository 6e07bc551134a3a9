"""
Image processing stages - functional architecture.

This package provides the editing pipeline stages as pure functions on BGRA
NumPy buffers:
- converters: Buffer layout conversions (BGRA, BGR, Pillow)
- decoder: Bounded decoding with EXIF orientation
- orientation: EXIF orientation to flip/rotate operations
- geometry: Flip, crop, rotate and scale
- color: Color matrix filtering
- blending: Blend-mode compositing
- text: Text overlay rendering
- drawing: Vector primitive drawing
- encoder: PNG/JPEG encoding

All utilities are re-exported from this module for convenient access.
"""

# Blending
from core.image.blending import BLEND_FUNCTIONS, blend_pixels, composite

# Color filter
from core.image.color import IDENTITY_MATRIX, apply_color_matrix

# Converter functions
from core.image.converters import ensure_bgr, ensure_bgra, from_pil, new_canvas, to_pil

# Decoder
from core.image.decoder import (
    DecodedImage,
    calculate_in_sample_size,
    decode,
    decode_full,
    read_header,
)

# Drawing
from core.image.drawing import draw_parts

# Encoder
from core.image.encoder import encode, encode_to_file

# Geometry functions
from core.image.geometry import crop, flip, relative_rect, rotate, rotated_bounds, scale

# Orientation
from core.image.orientation import orientation_operations, resolve

# Text
from core.image.text import render_texts, wrap_text

__all__ = [
    # Converter functions
    "ensure_bgr",
    "ensure_bgra",
    "from_pil",
    "new_canvas",
    "to_pil",
    # Decoder
    "DecodedImage",
    "calculate_in_sample_size",
    "decode",
    "decode_full",
    "read_header",
    # Orientation
    "orientation_operations",
    "resolve",
    # Geometry functions
    "crop",
    "flip",
    "relative_rect",
    "rotate",
    "rotated_bounds",
    "scale",
    # Color filter
    "IDENTITY_MATRIX",
    "apply_color_matrix",
    # Blending
    "BLEND_FUNCTIONS",
    "blend_pixels",
    "composite",
    # Text
    "render_texts",
    "wrap_text",
    # Drawing
    "draw_parts",
    # Encoder
    "encode",
    "encode_to_file",
]
