"""
Base schemas for channel payloads.

Provides the base class shared by every option, request and result model
decoded from a generic key/value argument map.
"""

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict


class OptionModel(BaseModel):
    """
    Base class for all payload models.

    Provides common functionality including:
    - Unknown keys are ignored, missing required keys fail validation
    - Fields may be populated by their wire alias or their Python name
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, use_enum_values=False)


def decode_image_bytes(value: Any) -> Any:
    """
    Coerce an image payload to bytes.

    Accepts raw bytes, a list of byte values, or a base64 string (as sent
    over JSON). Anything else is left for pydantic to reject.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, list):
        return bytes(value)
    if isinstance(value, str):
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image payload is not valid base64: {e}")
    return value
