"""
Image Editor - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.channel import ImageEditorChannel  # noqa: E402
from api.exceptions import register_exception_handlers  # noqa: E402

# Import routers  # noqa: E402
from api.routers import editor, system  # noqa: E402

# Import configuration  # noqa: E402
from common.constants import SystemConstants  # noqa: E402
from config import get_settings  # noqa: E402

# Import core components  # noqa: E402
from core.font_cache import get_font_cache  # noqa: E402
from core.worker_pool import WorkerPool  # noqa: E402
from services.editor_service import EditorService  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Image Editor server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    worker_pool = WorkerPool(
        max_workers=settings.worker.max_workers,
        queue_size=settings.worker.queue_size,
        submit_timeout=settings.worker.submit_timeout,
    )
    font_cache = get_font_cache()
    editor_service = EditorService(
        cache_dir=settings.system.cache_dir,
        editor_config=settings.editor,
        font_cache=font_cache,
    )

    # Store components in app state for access by routers
    app.state.worker_pool = worker_pool
    app.state.font_cache = font_cache
    app.state.editor_service = editor_service
    app.state.channel = ImageEditorChannel(editor_service, worker_pool)
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    logger.info("All components initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down Image Editor server...")
    worker_pool.shutdown(wait=True)
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Image Editor",
    description="Image editing pipeline: decode, transform, composite and encode",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(editor.router, prefix="/api/editor", tags=["Editor"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Image Editor",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "editor": "/api/editor",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "worker_pool": getattr(app.state, "worker_pool", None) is not None,
            "editor_service": getattr(app.state, "editor_service", None) is not None,
            "channel": getattr(app.state, "channel", None) is not None,
        },
    }


if __name__ == "__main__":
    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
        loop="asyncio",
    )

    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Server exiting...")
