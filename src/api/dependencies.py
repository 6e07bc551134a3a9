"""
Shared FastAPI dependencies for the Image Editor service.
Centralizes access to the components created at startup.
"""

import logging

from fastapi import HTTPException, Request

from api.channel import ImageEditorChannel
from core.font_cache import FontCache
from core.worker_pool import WorkerPool

logger = logging.getLogger(__name__)


def _state(request: Request, name: str):
    try:
        return getattr(request.app.state, name)
    except AttributeError as e:
        logger.error(f"{name} not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail=f"Internal server error: {name} not initialized"
        )


def get_channel(request: Request) -> ImageEditorChannel:
    """Get the method channel instance."""
    return _state(request, "channel")


def get_worker_pool(request: Request) -> WorkerPool:
    """Get WorkerPool instance."""
    return _state(request, "worker_pool")


def get_font_cache(request: Request) -> FontCache:
    """Get FontCache instance."""
    return _state(request, "font_cache")
