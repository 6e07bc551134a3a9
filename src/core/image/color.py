"""
Color matrix filtering.

The matrix uses the common 4x5 convention: four rows producing R, G, B and A
from the input (R, G, B, A, 1), with the last column an additive offset in
0..255 channel space. Buffers are BGRA, so the matrix is permuted into that
channel order once and applied with a single ``cv2.transform`` pass.
"""

import logging
from typing import Sequence

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# BGRA position -> RGBA position
_BGRA_FROM_RGBA = [2, 1, 0, 3]

IDENTITY_MATRIX = [
    1, 0, 0, 0, 0,
    0, 1, 0, 0, 0,
    0, 0, 1, 0, 0,
    0, 0, 0, 1, 0,
]  # fmt: skip


def to_bgra_matrix(matrix: Sequence[float]) -> np.ndarray:
    """
    Reorder an RGBA color matrix for BGRA buffers.

    Args:
        matrix: 20 coefficients, row-major, RGBA order

    Returns:
        4x5 float32 matrix in BGRA order
    """
    rgba = np.asarray(matrix, dtype=np.float32).reshape(4, 5)
    bgra = np.empty_like(rgba)
    for out_row, src_row in enumerate(_BGRA_FROM_RGBA):
        bgra[out_row, :4] = rgba[src_row, _BGRA_FROM_RGBA]
        bgra[out_row, 4] = rgba[src_row, 4]
    return bgra


def apply_color_matrix(image: np.ndarray, matrix: Sequence[float]) -> np.ndarray:
    """
    Apply a 4x5 color matrix to every pixel.

    Args:
        image: BGRA uint8 buffer
        matrix: 20 coefficients, row-major, RGBA order

    Returns:
        New buffer with saturated results
    """
    return cv2.transform(image, to_bgra_matrix(matrix))
