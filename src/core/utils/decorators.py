"""
Utility decorators and helpers for common patterns.
"""

import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def timer() -> Generator[dict, None, None]:
    """
    Context manager to measure execution time.

    Usage:
        with timer() as t:
            handler.handle(options)
        logger.info(f"Edited in {t['ms']}ms")

    Yields:
        Dictionary with 'ms' key containing processing time in milliseconds
    """
    result = {"ms": 0}
    start_time = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = int((time.perf_counter() - start_time) * 1000)
