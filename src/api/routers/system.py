"""
System API Router - Status, configuration and fonts
"""

import logging
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_font_cache, get_worker_pool
from core.font_cache import FontCache
from core.worker_pool import WorkerPool

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
async def get_status(pool: WorkerPool = Depends(get_worker_pool)) -> Dict[str, Any]:
    """Get service status and worker pool load"""
    return {
        "status": "healthy",
        "uptime": time.time() - START_TIME,
        "worker_pool": {
            "max_workers": pool.max_workers,
            "queue_size": pool.queue_size,
            "in_flight": pool.in_flight,
        },
    }


@router.get("/config")
async def get_config(request: Request) -> Dict[str, Any]:
    """Get the active configuration"""
    return request.app.state.config


@router.get("/fonts")
async def list_fonts(font_cache: FontCache = Depends(get_font_cache)) -> Dict[str, Any]:
    """List registered font names"""
    return {"fonts": font_cache.names()}
