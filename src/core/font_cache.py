"""
Process-wide font registry.

Maps a font name to the file it was registered from and hands out sized
Pillow font objects. Registration is additive and there is no teardown.

Writes are serialized by a lock and publish a new mapping; readers look up
the current mapping without locking, so a reader never sees a half-added
entry. A font file is loaded before its name is published, so a file that
fails to load leaves the registry unchanged.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Tuple

from PIL import ImageFont

from api.exceptions import FontLoadError, FontNotFound
from common.constants import EditorConstants

logger = logging.getLogger(__name__)

FontHandle = ImageFont.FreeTypeFont


class FontCache:
    """Thread-safe name -> font file registry with per-size font objects."""

    def __init__(self):
        self._lock = threading.Lock()
        self._paths: Dict[str, str] = {}
        self._sized: Dict[Tuple[str, int], FontHandle] = {}

    def register_font(self, path: str) -> str:
        """
        Load a TrueType/OpenType font and register it under its file stem.

        Registering the same file again returns the existing name; a
        different file with the same stem replaces the earlier entry.

        Args:
            path: Font file path

        Returns:
            Name to reference the font by in text operations

        Raises:
            FontLoadError: If the file cannot be loaded as a font
        """
        try:
            font = ImageFont.truetype(path, EditorConstants.DEFAULT_FONT_SIZE_PX)
        except (OSError, ValueError) as e:
            raise FontLoadError(path, str(e))

        name = Path(path).stem

        with self._lock:
            if self._paths.get(name) == path:
                return name

            paths = dict(self._paths)
            paths[name] = path
            sized = {key: f for key, f in self._sized.items() if key[0] != name}
            sized[(name, EditorConstants.DEFAULT_FONT_SIZE_PX)] = font

            self._sized = sized
            self._paths = paths

        logger.info(f"Registered font '{name}' from {path}")
        return name

    def get_font(self, name: str, size: int) -> FontHandle:
        """
        Get a registered font at a pixel size.

        Raises:
            FontNotFound: If no font is registered under ``name``
        """
        key = (name, size)
        font = self._sized.get(key)
        if font is not None:
            return font

        path = self._paths.get(name)
        if path is None:
            raise FontNotFound(name)

        font = ImageFont.truetype(path, size)
        with self._lock:
            if self._paths.get(name) == path:
                sized = dict(self._sized)
                sized[key] = font
                self._sized = sized
        return font

    def has_font(self, name: str) -> bool:
        return name in self._paths

    def names(self) -> List[str]:
        """Registered font names, sorted."""
        return sorted(self._paths)

    def __len__(self) -> int:
        return len(self._paths)


_font_cache = FontCache()


def get_font_cache() -> FontCache:
    """Get the process-wide font cache."""
    return _font_cache
