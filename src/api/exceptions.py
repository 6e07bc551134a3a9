"""
Custom exceptions and error handlers for the Image Editor service.
Provides consistent error handling across the method channel and all endpoints.
"""

import logging
import traceback
from typing import Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# Standard Messages
class ErrorMessages:
    """Standard error messages."""

    DECODE_FAILED = "decode bitmap error"
    MERGE_FAILED = "cannot merge image"
    NOT_IMPLEMENTED = "method {method} is not implemented"
    CLIP_OUT_OF_BOUNDS = "x + width must be <= bitmap.width() ({x2} > {width})"
    CLIP_OUT_OF_BOUNDS_Y = "y + height must be <= bitmap.height() ({y2} > {height})"
    CLIP_NEGATIVE_ORIGIN = "x and y must be >= 0 (got {x}, {y})"
    CLIP_EMPTY = "width and height must be > 0 (got {width}x{height})"
    FONT_LOAD_FAILED = "cannot load font from {path}: {error}"
    FONT_NOT_FOUND = "font {name} is not registered"
    POOL_SATURATED = "worker pool is saturated ({capacity} requests in flight)"
    INVALID_ARGUMENTS = "invalid arguments for {method}"


# Custom exception classes
class EditorException(Exception):
    """Base exception for the Image Editor."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class DecodeError(EditorException):
    """Raised when a source is missing or cannot be decoded as an image."""

    def __init__(self, reason: str = ""):
        super().__init__(
            message=ErrorMessages.DECODE_FAILED,
            status_code=400,
            details={"reason": reason} if reason else {},
        )


class BoundsError(EditorException, ValueError):
    """Raised by the crop primitive when a rectangle exceeds the buffer."""

    def __init__(self, message: str, rect: Dict, bounds: Dict):
        super().__init__(
            message=message,
            status_code=400,
            details={"rect": rect, "bounds": bounds},
        )


class MergeFailure(EditorException):
    """Raised when the merge canvas or its final buffer cannot be produced."""

    def __init__(self, reason: str = ""):
        super().__init__(
            message=ErrorMessages.MERGE_FAILED,
            status_code=422,
            details={"reason": reason} if reason else {},
        )


class UnknownRequest(EditorException):
    """Raised when a method name is not part of the channel protocol."""

    def __init__(self, method: str):
        super().__init__(
            message=ErrorMessages.NOT_IMPLEMENTED.format(method=method),
            status_code=404,
            details={"method": method},
        )


class FontNotFound(EditorException, LookupError):
    """Raised when a font name has not been registered."""

    def __init__(self, name: str):
        super().__init__(
            message=ErrorMessages.FONT_NOT_FOUND.format(name=name),
            status_code=404,
            details={"name": name},
        )


class FontLoadError(EditorException):
    """Raised when a font file cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=ErrorMessages.FONT_LOAD_FAILED.format(path=path, error=reason),
            status_code=400,
            details={"path": path, "reason": reason},
        )


class WorkerPoolFull(EditorException):
    """Raised when a request cannot be queued within the submit timeout."""

    def __init__(self, capacity: int):
        super().__init__(
            message=ErrorMessages.POOL_SATURATED.format(capacity=capacity),
            status_code=503,
            details={"capacity": capacity},
        )


# Exception handlers for FastAPI
async def editor_exception_handler(request: Request, exc: EditorException) -> JSONResponse:
    """
    Handler for custom Image Editor exceptions.

    Args:
        request: FastAPI request
        exc: EditorException instance

    Returns:
        JSON response with error details
    """
    logger.error(f"EditorException: {exc.message}", extra={"details": exc.details})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details, "type": exc.__class__.__name__},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handler for request validation errors.

    Args:
        request: FastAPI request
        exc: Validation exception

    Returns:
        JSON response with validation error details
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"][1:]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Validation failed", "details": errors, "type": "ValidationError"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unexpected exceptions.

    Args:
        request: FastAPI request
        exc: Any exception

    Returns:
        JSON response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    debug_mode = getattr(request.app.state, "debug", False)

    if debug_mode:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "details": {
                    "exception": str(exc),
                    "type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                "type": "InternalError",
            },
        )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": {}, "type": "InternalError"},
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(EditorException, editor_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
