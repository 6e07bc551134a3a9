"""
Image Merger - Composites several encoded images onto one canvas
"""

import logging
from typing import Optional

from common.constants import Colors
from common.enums import BlendMode
from core.image.blending import composite
from core.image.converters import new_canvas
from core.image.decoder import decode_full
from core.image.encoder import encode
from core.utils.decorators import timer
from schemas.options import MergeOption

logger = logging.getLogger(__name__)


class ImageMerger:
    """
    Draws each source of a MergeOption into its position rectangle on a
    transparent ``w`` x ``h`` canvas, in list order, then encodes the canvas.
    """

    def __init__(self, option: MergeOption):
        self.option = option

    def process(self) -> Optional[bytes]:
        """
        Run the merge.

        Returns:
            Encoded canvas, or None when the canvas cannot be allocated

        Raises:
            DecodeError: If any source cannot be decoded
        """
        width, height = self.option.width, self.option.height
        if width <= 0 or height <= 0:
            logger.warning(f"Invalid merge canvas size {width}x{height}")
            return None

        try:
            canvas = new_canvas(width, height, Colors.TRANSPARENT)
        except (MemoryError, ValueError) as e:
            logger.error(f"Cannot allocate {width}x{height} merge canvas: {e}")
            return None

        with timer() as t:
            for index, image in enumerate(self.option.images):
                source = decode_full(image.src)
                canvas = composite(canvas, source, image.position, BlendMode(image.blend_mode))
                logger.debug(
                    f"Merged image {index} into {image.position.to_dict()} "
                    f"({BlendMode(image.blend_mode).value})"
                )

        logger.info(
            f"Merged {len(self.option.images)} images onto {width}x{height} in {t['ms']}ms"
        )
        return encode(canvas, self.option.fmt)
