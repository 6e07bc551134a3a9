"""
Editor API Router - Method channel over HTTP
"""

import base64
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from api.channel import ImageEditorChannel
from api.dependencies import get_channel
from schemas.requests import MethodResult

logger = logging.getLogger(__name__)

router = APIRouter()


def to_response(result: MethodResult) -> JSONResponse:
    """
    Serialize a MethodResult, base64-encoding binary results.

    Args:
        result: Channel result

    Returns:
        JSON response with the result's HTTP status
    """
    content = result.model_dump(mode="json", exclude={"result"})
    if isinstance(result.result, (bytes, bytearray)):
        content["result"] = base64.b64encode(result.result).decode("utf-8")
    else:
        content["result"] = result.result
    return JSONResponse(status_code=result.http_status, content=content)


@router.get("/methods")
async def list_methods(channel: ImageEditorChannel = Depends(get_channel)) -> Dict[str, Any]:
    """List the channel methods."""
    return {"methods": channel.methods}


@router.post("/{method}")
async def call_method(
    method: str,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
    channel: ImageEditorChannel = Depends(get_channel),
) -> JSONResponse:
    """
    Call a channel method.

    Binary arguments (``image``, ``img``, ``src`` of merge sources) are sent
    as base64 strings; binary results come back base64-encoded.

    Args:
        method: Channel method name
        arguments: Argument map of the method

    Returns:
        MethodResult as JSON; 404 for unknown methods, an error status for failures
    """
    result = await channel.call_async(method, arguments or {})
    if not result.ok:
        logger.warning(f"{method} answered {result.status.value} ({result.http_status})")
    return to_response(result)
