"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client(cache_dir, font_cache):
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from api.channel import ImageEditorChannel
    from config import EditorConfig
    from core.worker_pool import WorkerPool
    from main import app
    from services.editor_service import EditorService

    # Initialize components (lightweight for testing)
    worker_pool = WorkerPool(max_workers=2, queue_size=4, submit_timeout=1.0)
    editor_service = EditorService(
        cache_dir=cache_dir, editor_config=EditorConfig(), font_cache=font_cache
    )

    # Create test config
    test_config = {
        "editor": {"decode_max_width": 700, "decode_max_height": 700},
        "system": {"debug": False},
    }

    # Set in app state
    app.state.worker_pool = worker_pool
    app.state.font_cache = font_cache
    app.state.editor_service = editor_service
    app.state.channel = ImageEditorChannel(editor_service, worker_pool)
    app.state.config = test_config
    app.state.debug = False

    # Create test client (no context manager so startup does not replace the state)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    worker_pool.shutdown(wait=True)
