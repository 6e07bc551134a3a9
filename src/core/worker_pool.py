"""
Worker Pool - Runs editor requests off the caller's thread with bounded capacity
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from api.exceptions import WorkerPoolFull
from common.constants import WorkerConstants

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerPool:
    """
    Thread pool with a bounded number of in-flight requests.

    At most ``max_workers`` requests run at once and at most ``queue_size``
    more wait for a worker. A submit beyond that waits up to
    ``submit_timeout`` seconds for a slot and then fails with WorkerPoolFull.
    Running work is never cancelled or timed out.
    """

    def __init__(
        self,
        max_workers: int = WorkerConstants.DEFAULT_MAX_WORKERS,
        queue_size: int = WorkerConstants.DEFAULT_QUEUE_SIZE,
        submit_timeout: float = WorkerConstants.DEFAULT_SUBMIT_TIMEOUT_SECONDS,
    ):
        """
        Initialize Worker Pool

        Args:
            max_workers: Number of worker threads
            queue_size: Requests allowed to wait for a worker
            submit_timeout: Seconds a submit waits for a free slot
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if queue_size < 0:
            raise ValueError(f"queue_size must be >= 0, got {queue_size}")

        self.max_workers = max_workers
        self.queue_size = queue_size
        self.submit_timeout = submit_timeout
        self.capacity = max_workers + queue_size

        self._slots = threading.BoundedSemaphore(self.capacity)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=WorkerConstants.THREAD_NAME_PREFIX
        )

        # In-flight counter (running + queued)
        self._in_flight = 0
        self._lock = threading.Lock()

        logger.info(
            f"Worker Pool initialized: {max_workers} workers, "
            f"queue {queue_size}, submit timeout {submit_timeout}s"
        )

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def submit(
        self, fn: Callable[..., T], *args, timeout: Optional[float] = None, **kwargs
    ) -> "Future[T]":
        """
        Schedule ``fn(*args, **kwargs)`` on a worker.

        Args:
            fn: Callable to run
            timeout: Seconds to wait for a slot (pool default when None)

        Returns:
            Future for the result

        Raises:
            WorkerPoolFull: If no slot frees up within the timeout
        """
        wait = self.submit_timeout if timeout is None else timeout
        if not self._slots.acquire(timeout=wait):
            logger.warning(f"Worker pool saturated ({self.capacity} in flight), rejecting request")
            raise WorkerPoolFull(self.capacity)

        with self._lock:
            self._in_flight += 1

        try:
            future = self._executor.submit(fn, *args, **kwargs)
        except BaseException:
            self._release()
            raise

        future.add_done_callback(lambda _: self._release())
        return future

    def run(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Submit and wait for the result, re-raising any exception from ``fn``."""
        return self.submit(fn, *args, **kwargs).result()

    def _release(self) -> None:
        with self._lock:
            self._in_flight -= 1
        self._slots.release()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for in-flight requests."""
        self._executor.shutdown(wait=wait)
        logger.info("Worker Pool shut down")
