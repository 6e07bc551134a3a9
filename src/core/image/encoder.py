"""
Image encoding.

Serializes a BGRA buffer to PNG or JPEG with OpenCV:
- PNG keeps alpha and is lossless; quality only selects the zlib effort
- JPEG drops alpha and uses quality directly
"""

import logging
import os
from typing import List, Optional, Union

import cv2
import numpy as np

from common.constants import EditorConstants
from common.enums import OutputFormat
from core.image.converters import ensure_bgr
from schemas.options import FormatOption

logger = logging.getLogger(__name__)


def png_compression(quality: int) -> int:
    """Map quality (0-100) to PNG compression (0-9, higher = more compression)."""
    compression = 9 - int(quality / 11)
    return max(
        EditorConstants.PNG_MIN_COMPRESSION, min(EditorConstants.PNG_MAX_COMPRESSION, compression)
    )


def _encode_params(fmt: FormatOption) -> List[int]:
    if fmt.format == OutputFormat.JPEG:
        return [cv2.IMWRITE_JPEG_QUALITY, fmt.quality, cv2.IMWRITE_JPEG_OPTIMIZE, 1]
    return [cv2.IMWRITE_PNG_COMPRESSION, png_compression(fmt.quality)]


def encode(image: np.ndarray, fmt: Optional[FormatOption] = None) -> bytes:
    """
    Encode a BGRA buffer.

    Args:
        image: BGRA buffer
        fmt: Output format (PNG at quality 100 when omitted)

    Returns:
        Encoded bytes

    Raises:
        ValueError: If OpenCV fails to encode the buffer
    """
    fmt = fmt or FormatOption()

    if fmt.format == OutputFormat.JPEG:
        image = ensure_bgr(image)

    ext = f".{fmt.extension}"
    success, buffer = cv2.imencode(ext, image, _encode_params(fmt))
    if not success:
        raise ValueError(f"Failed to encode image to {fmt.extension}")

    logger.debug(
        f"Encoded {image.shape[1]}x{image.shape[0]} as {fmt.extension} "
        f"(quality {fmt.quality}, {buffer.size} bytes)"
    )
    return buffer.tobytes()


def encode_to_file(
    image: np.ndarray,
    fmt: Optional[FormatOption],
    path: Union[str, os.PathLike],
) -> str:
    """
    Encode a BGRA buffer and write it to ``path``.

    The destination is opened only after encoding succeeded and is closed on
    every path out of the write.

    Returns:
        The destination path
    """
    data = encode(image, fmt)
    with open(path, "wb") as f:
        f.write(data)
    return os.fspath(path)
