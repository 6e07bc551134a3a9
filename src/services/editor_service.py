"""
Editor Service - Business logic for the image editing pipeline.

This service orchestrates one request end to end: decode the source,
prepend the orientation correction, run the edit operations and encode the
result to memory or a file. It also runs merges and registers fonts.
"""

import logging
import os
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from api.exceptions import DecodeError, MergeFailure
from common.enums import OutputFormat
from config import EditorConfig
from core.font_cache import FontCache, get_font_cache
from core.image.decoder import decode
from core.image.orientation import orientation_operations
from core.image_handler import ImageHandler
from core.image_merger import ImageMerger
from core.utils.decorators import timer
from schemas.options import FormatOption, MergeOption, Operation

logger = logging.getLogger(__name__)

Source = Union[str, bytes]


class EditorService:
    """
    Service for editing, merging and font registration.

    Every method is synchronous and owns its buffers exclusively; callers
    run it on a worker thread.
    """

    def __init__(
        self,
        cache_dir: str,
        editor_config: Optional[EditorConfig] = None,
        font_cache: Optional[FontCache] = None,
    ):
        """
        Initialize editor service.

        Args:
            cache_dir: Directory for merge output files
            editor_config: Decode bounds and default output format
            font_cache: Font registry (defaults to the process-wide one)
        """
        self.cache_dir = cache_dir
        self.config = editor_config or EditorConfig()
        self.font_cache = font_cache or get_font_cache()

    # === Single-image pipeline ===

    def memory_to_memory(
        self, image: bytes, options: List[Operation], fmt: Optional[FormatOption] = None
    ) -> bytes:
        """Edit in-memory bytes and return the encoded result."""
        handler = self._run(image, options)
        return handler.output_bytes(self._format(fmt))

    def memory_to_file(
        self,
        image: bytes,
        options: List[Operation],
        fmt: Optional[FormatOption] = None,
        target: Optional[str] = None,
    ) -> Optional[str]:
        """Edit in-memory bytes and write the result to ``target``."""
        handler = self._run(image, options)
        return self._write(handler, target, fmt)

    def file_to_memory(
        self, src: str, options: List[Operation], fmt: Optional[FormatOption] = None
    ) -> bytes:
        """Edit an image file and return the encoded result."""
        handler = self._run(src, options)
        return handler.output_bytes(self._format(fmt))

    def file_to_file(
        self,
        src: str,
        options: List[Operation],
        fmt: Optional[FormatOption] = None,
        target: Optional[str] = None,
    ) -> Optional[str]:
        """Edit an image file and write the result to ``target``."""
        handler = self._run(src, options)
        return self._write(handler, target, fmt)

    def _run(self, source: Optional[Source], options: List[Operation]) -> ImageHandler:
        if source is None:
            raise DecodeError("no source given")

        with timer() as t:
            decoded = decode(source, self.config.bounding_box)
            operations = orientation_operations(decoded.orientation) + list(options)

            handler = ImageHandler(decoded.buffer, self.font_cache)
            # The handler owns the buffer from here on
            decoded.buffer = None
            handler.handle(operations)

        logger.info(
            f"Edited {decoded.natural_width}x{decoded.natural_height} source "
            f"(sample size {decoded.sample_size}) with {len(operations)} operations "
            f"-> {handler.width}x{handler.height} in {t['ms']}ms"
        )
        return handler

    def _write(
        self, handler: ImageHandler, target: Optional[str], fmt: Optional[FormatOption]
    ) -> Optional[str]:
        if target is None:
            logger.warning("File output requested without a target, nothing written")
            return None
        return handler.output_to_file(target, self._format(fmt))

    def _format(self, fmt: Optional[FormatOption]) -> FormatOption:
        if fmt is not None:
            return fmt
        return FormatOption(
            format=OutputFormat(self.config.default_format),
            quality=self.config.default_quality,
        )

    # === Merge pipeline ===

    def merge_to_memory(self, option: MergeOption) -> bytes:
        """
        Merge sources onto one canvas and return the encoded result.

        Raises:
            MergeFailure: If the canvas cannot be produced
            DecodeError: If a source cannot be decoded
        """
        data = ImageMerger(option).process()
        if data is None:
            raise MergeFailure(f"canvas {option.width}x{option.height} could not be created")
        return data

    def merge_to_file(self, option: MergeOption) -> bytes:
        """
        Merge sources, write the result into the cache directory and return it.

        The file is named ``<epoch millis>.<jpg|png>``.
        """
        data = self.merge_to_memory(option)
        path, _ = self.merge_output_path(option.fmt)
        with open(path, "wb") as f:
            f.write(data)
        logger.info(f"Wrote merge result to {path}")
        return data

    def merge_output_path(self, fmt: FormatOption) -> Tuple[str, int]:
        """Path in the cache directory for a merge result, with its timestamp."""
        millis = int(time.time() * 1000)
        os.makedirs(self.cache_dir, exist_ok=True)
        return str(Path(self.cache_dir) / f"{millis}.{fmt.extension}"), millis

    # === Environment ===

    def get_cache_path(self) -> str:
        """Directory used for merge output files."""
        return self.cache_dir

    def register_font(self, path: str) -> str:
        """
        Register a font file.

        Returns:
            Name to use as ``fontName`` in text operations

        Raises:
            FontLoadError: If the file is not a loadable font
        """
        return self.font_cache.register_font(path)

    def list_fonts(self) -> List[str]:
        return self.font_cache.names()
