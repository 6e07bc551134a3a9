"""
Constants and configuration values for the Image Editor service.
Centralizes all magic numbers and configuration constants.
"""


# Editor Constants
class EditorConstants:
    """Constants related to decoding, editing and encoding."""

    # Decode bounding box (bounds peak memory for very large sources)
    DEFAULT_DECODE_MAX_WIDTH = 700
    DEFAULT_DECODE_MAX_HEIGHT = 700
    MIN_DECODE_DIMENSION = 1
    MAX_DECODE_DIMENSION = 16384

    # Output defaults
    DEFAULT_FORMAT = 0  # PNG
    DEFAULT_QUALITY = 100
    MIN_QUALITY = 0
    MAX_QUALITY = 100

    # PNG compression range (zlib level)
    PNG_MIN_COMPRESSION = 0
    PNG_MAX_COMPRESSION = 9

    # Buffer layout
    CHANNELS = 4  # BGRA

    # Text rendering
    DEFAULT_FONT_SIZE_PX = 14
    LINE_SPACING_MULTIPLIER = 1.0
    LINE_SPACING_EXTRA = 0

    # Drawing
    DEFAULT_LINE_WEIGHT = 2
    BEZIER_SEGMENTS = 32

    # Output file naming
    JPEG_EXTENSION = "jpg"
    PNG_EXTENSION = "png"


# Worker Pool Constants
class WorkerConstants:
    """Constants for the request worker pool."""

    DEFAULT_MAX_WORKERS = 4
    MAX_WORKERS_LIMIT = 64
    DEFAULT_QUEUE_SIZE = 16
    MAX_QUEUE_SIZE = 1024
    DEFAULT_SUBMIT_TIMEOUT_SECONDS = 30.0
    THREAD_NAME_PREFIX = "image_editor"


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    # Timeouts
    REQUEST_TIMEOUT_SECONDS = 30

    # File uploads
    MAX_UPLOAD_SIZE_MB = 50

    # API versions
    API_VERSION = "v1"


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # File system
    CACHE_DIR = "/tmp/image_editor/cache"


# Color Constants (BGRA format for OpenCV)
class Colors:
    """Standard colors for canvases and drawing operations (BGRA format)."""

    TRANSPARENT = (0, 0, 0, 0)
    BLACK = (0, 0, 0, 255)
    WHITE = (255, 255, 255, 255)
    RED = (0, 0, 255, 255)
    GREEN = (0, 255, 0, 255)
    BLUE = (255, 0, 0, 255)
