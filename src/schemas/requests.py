"""
Method channel request and result models.

This module contains the argument records of each channel method and the
structured result every call answers with.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from common.enums import ResultStatus
from schemas.base import OptionModel
from schemas.options import FormatOption, ImageBytes, MergeOption, Operation


class EditRequest(OptionModel):
    """
    Single-image pipeline request.

    ``image`` carries in-memory bytes (memoryTo*), ``src`` a file path
    (fileTo*). ``target`` is only read by the *ToFile methods.
    """

    image: Optional[ImageBytes] = Field(default=None, description="Encoded source image")
    src: Optional[str] = Field(default=None, description="Source image path")
    target: Optional[str] = Field(default=None, description="Destination path")
    options: List[Operation] = Field(..., description="Operations applied in order")
    fmt: Optional[FormatOption] = Field(default=None, description="Output encoding")


class MergeRequest(OptionModel):
    """Merge pipeline request."""

    option: MergeOption


class RegisterFontRequest(OptionModel):
    """Font registration request."""

    path: str = Field(..., description="Path to a TrueType/OpenType font file")


class MethodResult(OptionModel):
    """
    Answer to a method channel call.

    Success carries ``result``; errors carry ``error`` (the reportable code or
    message) and optional ``details``; unknown methods answer ``not_implemented``.
    """

    status: ResultStatus
    result: Any = None
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    http_status: int = Field(default=200, exclude=True, description="Status for HTTP callers")

    @model_validator(mode="after")
    def check_error_message(self):
        """Error results always carry a message."""
        if self.status == ResultStatus.ERROR and not self.error:
            raise ValueError("Error results require an error message")
        return self

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, result: Any = None) -> "MethodResult":
        return cls(status=ResultStatus.SUCCESS, result=result)

    @classmethod
    def failure(
        cls, error: str, details: Optional[Dict[str, Any]] = None, http_status: int = 400
    ) -> "MethodResult":
        return cls(status=ResultStatus.ERROR, error=error, details=details, http_status=http_status)

    @classmethod
    def not_implemented(cls) -> "MethodResult":
        return cls(status=ResultStatus.NOT_IMPLEMENTED, http_status=404)
