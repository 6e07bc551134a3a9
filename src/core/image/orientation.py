"""
EXIF orientation resolution.

Maps the orientation tag stored by cameras to the rotation and mirroring that
displays the image upright, and turns that into implicit edit operations.
"""

import logging
from typing import Dict, List, Tuple, Union

from common.enums import Orientation
from schemas.options import FlipOption, Operation, RotateOption

logger = logging.getLogger(__name__)

# tag -> (clockwise degrees, flip horizontal, flip vertical)
ORIENTATION_TABLE: Dict[Orientation, Tuple[int, bool, bool]] = {
    Orientation.NORMAL: (0, False, False),
    Orientation.FLIP_HORIZONTAL: (0, True, False),
    Orientation.ROTATE_180: (180, False, False),
    Orientation.FLIP_VERTICAL: (0, False, True),
    Orientation.TRANSPOSE: (90, True, False),
    Orientation.ROTATE_90: (90, False, False),
    Orientation.TRANSVERSE: (270, True, False),
    Orientation.ROTATE_270: (270, False, False),
}


def to_orientation(tag: Union[int, Orientation, None]) -> Orientation:
    """
    Coerce a raw tag value to an Orientation.

    Missing or out-of-range values read as NORMAL.
    """
    try:
        return Orientation(int(tag)) if tag is not None else Orientation.NORMAL
    except (TypeError, ValueError):
        logger.debug(f"Ignoring unknown orientation tag: {tag!r}")
        return Orientation.NORMAL


def resolve(tag: Union[int, Orientation, None]) -> Tuple[int, FlipOption]:
    """
    Resolve an orientation tag to (rotate degrees, flip).

    Args:
        tag: EXIF orientation value

    Returns:
        Tuple of (degrees in {0, 90, 180, 270}, FlipOption)
    """
    degrees, horizontal, vertical = ORIENTATION_TABLE.get(to_orientation(tag), (0, False, False))
    return degrees, FlipOption(horizontal=horizontal, vertical=vertical)


def orientation_operations(tag: Union[int, Orientation, None]) -> List[Operation]:
    """
    Build the implicit operations that correct an orientation.

    The rotation comes first, then the flip, so TRANSPOSE and TRANSVERSE
    mirror across the correct diagonal. Identity parts are omitted and
    NORMAL yields an empty list.
    """
    degrees, flip = resolve(tag)

    operations: List[Operation] = []
    if degrees:
        operations.append(RotateOption(angle=degrees))
    if not flip.is_identity:
        operations.append(flip)
    return operations
