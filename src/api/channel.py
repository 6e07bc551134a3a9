"""
Method channel for the Image Editor.

Receives a method name and a generic argument map, runs the request on the
bounded worker pool and answers with a MethodResult. No exception raised by
a request escapes a call: every failure becomes an error or not-implemented
result.
"""

import asyncio
import logging
import traceback
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from api.exceptions import (
    BoundsError,
    DecodeError,
    EditorException,
    ErrorMessages,
    UnknownRequest,
)
from core.utils.decorators import timer
from core.worker_pool import WorkerPool
from schemas.requests import EditRequest, MergeRequest, MethodResult, RegisterFontRequest
from services.editor_service import EditorService

logger = logging.getLogger(__name__)


class ImageEditorChannel:
    """
    Dispatches channel calls to the editor service.

    Methods: memoryToFile, memoryToMemory, fileToMemory, fileToFile,
    mergeToMemory, mergeToFile, getCachePath, registerFont.
    """

    def __init__(self, service: EditorService, pool: WorkerPool):
        self.service = service
        self.pool = pool

        self._methods: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "memoryToFile": self._memory_to_file,
            "memoryToMemory": self._memory_to_memory,
            "fileToMemory": self._file_to_memory,
            "fileToFile": self._file_to_file,
            "mergeToMemory": self._merge_to_memory,
            "mergeToFile": self._merge_to_file,
            "getCachePath": self._get_cache_path,
            "registerFont": self._register_font,
        }

    @property
    def methods(self):
        return list(self._methods)

    def call(self, method: str, arguments: Optional[Dict[str, Any]] = None) -> MethodResult:
        """
        Run a method on a worker and wait for its result.

        Args:
            method: Channel method name
            arguments: Argument map

        Returns:
            MethodResult
        """
        try:
            return MethodResult.success(self.pool.run(self.dispatch, method, arguments or {}))
        except Exception as e:
            return self._failure(method, e)

    async def call_async(
        self, method: str, arguments: Optional[Dict[str, Any]] = None
    ) -> MethodResult:
        """Like call(), without blocking the event loop."""
        try:
            future = await asyncio.to_thread(
                self.pool.submit, self.dispatch, method, arguments or {}
            )
            return MethodResult.success(await asyncio.wrap_future(future))
        except Exception as e:
            return self._failure(method, e)

    def dispatch(self, method: str, arguments: Dict[str, Any]) -> Any:
        """
        Run a method on the current thread.

        Raises:
            UnknownRequest: If the method is not part of the channel
        """
        handler = self._methods.get(method)
        if handler is None:
            raise UnknownRequest(method)

        with timer() as t:
            result = handler(arguments)
        logger.info(f"{method} completed in {t['ms']}ms")
        return result

    def _failure(self, method: str, exc: Exception) -> MethodResult:
        if isinstance(exc, UnknownRequest):
            logger.warning(f"Unknown method: {method}")
            return MethodResult.not_implemented()

        if isinstance(exc, DecodeError):
            logger.error(f"{method}: {exc.message} {exc.details}")
            return MethodResult.failure(
                ErrorMessages.DECODE_FAILED, exc.details or None, exc.status_code
            )

        if isinstance(exc, ValidationError):
            logger.error(f"{method}: invalid arguments: {exc}")
            return MethodResult.failure(
                ErrorMessages.INVALID_ARGUMENTS.format(method=method),
                {
                    "errors": exc.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            )

        if isinstance(exc, EditorException) and not isinstance(exc, BoundsError):
            logger.error(f"{method}: {exc.message}", exc_info=exc)
            return MethodResult.failure(exc.message, exc.details or None, exc.status_code)

        logger.error(f"{method} failed", exc_info=exc)
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        http_status = exc.status_code if isinstance(exc, EditorException) else 500
        return MethodResult.failure(trace, {"type": exc.__class__.__name__}, http_status)

    # === Method handlers ===

    def _memory_to_file(self, arguments: Dict[str, Any]) -> Optional[str]:
        request = EditRequest.model_validate(arguments)
        return self.service.memory_to_file(
            request.image, request.options, request.fmt, request.target
        )

    def _memory_to_memory(self, arguments: Dict[str, Any]) -> bytes:
        request = EditRequest.model_validate(arguments)
        return self.service.memory_to_memory(request.image, request.options, request.fmt)

    def _file_to_memory(self, arguments: Dict[str, Any]) -> bytes:
        request = EditRequest.model_validate(arguments)
        return self.service.file_to_memory(request.src, request.options, request.fmt)

    def _file_to_file(self, arguments: Dict[str, Any]) -> Optional[str]:
        request = EditRequest.model_validate(arguments)
        return self.service.file_to_file(request.src, request.options, request.fmt, request.target)

    def _merge_to_memory(self, arguments: Dict[str, Any]) -> bytes:
        request = MergeRequest.model_validate(arguments)
        return self.service.merge_to_memory(request.option)

    def _merge_to_file(self, arguments: Dict[str, Any]) -> bytes:
        request = MergeRequest.model_validate(arguments)
        return self.service.merge_to_file(request.option)

    def _get_cache_path(self, arguments: Dict[str, Any]) -> str:
        return self.service.get_cache_path()

    def _register_font(self, arguments: Dict[str, Any]) -> str:
        request = RegisterFontRequest.model_validate(arguments)
        return self.service.register_font(request.path)
