"""
Pytest configuration and fixtures for Image Editor tests
"""

from pathlib import Path

import numpy as np
import pytest

from api.channel import ImageEditorChannel
from config import EditorConfig
from core.font_cache import FontCache
from core.worker_pool import WorkerPool
from services.editor_service import EditorService

from image_helpers import FONT_CANDIDATES, encode_jpeg, encode_png, make_image


@pytest.fixture
def red_image():
    """100x100 opaque red BGRA buffer"""
    return make_image(100, 100)


@pytest.fixture
def gradient_image():
    """64x48 BGRA buffer with distinct pixel values"""
    image = np.zeros((48, 64, 4), dtype=np.uint8)
    image[..., 0] = np.arange(64, dtype=np.uint8)[None, :] * 4
    image[..., 1] = np.arange(48, dtype=np.uint8)[:, None] * 5
    image[..., 2] = 128
    image[..., 3] = 255
    return image


@pytest.fixture
def red_png_bytes():
    """100x100 red PNG"""
    return encode_png(make_image(100, 100))


@pytest.fixture
def red_jpeg_bytes():
    """100x100 red JPEG"""
    return encode_jpeg(make_image(100, 100))


@pytest.fixture
def wide_png_bytes():
    """200x100 red PNG"""
    return encode_png(make_image(200, 100))


@pytest.fixture
def red_png_file(tmp_path, red_png_bytes):
    """100x100 red PNG on disk"""
    path = tmp_path / "red.png"
    path.write_bytes(red_png_bytes)
    return str(path)


@pytest.fixture
def red_jpeg_file(tmp_path, red_jpeg_bytes):
    """100x100 red JPEG on disk"""
    path = tmp_path / "red.jpg"
    path.write_bytes(red_jpeg_bytes)
    return str(path)


@pytest.fixture
def font_path():
    """Path to a system TrueType font (skips when none is installed)"""
    for candidate in FONT_CANDIDATES:
        if Path(candidate).exists():
            return candidate
    pytest.skip("No TrueType font available on this machine")


@pytest.fixture
def font_cache():
    """Fresh FontCache for each test"""
    return FontCache()


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "cache"
    path.mkdir()
    return str(path)


@pytest.fixture
def editor_service(cache_dir, font_cache):
    """Create EditorService instance for testing"""
    return EditorService(cache_dir=cache_dir, editor_config=EditorConfig(), font_cache=font_cache)


@pytest.fixture
def worker_pool():
    """Create WorkerPool instance for testing"""
    pool = WorkerPool(max_workers=2, queue_size=4, submit_timeout=1.0)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def channel(editor_service, worker_pool):
    """Create ImageEditorChannel instance for testing"""
    return ImageEditorChannel(editor_service, worker_pool)
