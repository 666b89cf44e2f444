"""
Access-code verification for the password-gated gallery.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import json
import logging

from app.core.access import AccessCodeNotConfigured, check_access_code
from app.core.config import Settings, get_settings
from app.schemas.access import AccessRequest, AccessResponse
from app.utils.instrumentation import log_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["access"])


def _respond(status_code: int, success: bool, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=AccessResponse(success=success, message=message).model_dump(),
    )


@router.post("/verify-access", response_model=AccessResponse)
async def verify_access(request: Request, settings: Settings = Depends(get_settings)):
    """
    Compare the submitted ``accessCode`` with the server's ACCESS_CODE.

    400 when the code is missing, 500 when the server has no code configured,
    401 on mismatch.
    """
    try:
        payload = await request.json()
        body = AccessRequest.model_validate(payload) if isinstance(payload, dict) else AccessRequest()
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        body = AccessRequest()

    if not body.access_code:
        return _respond(400, False, "Access code is required")

    try:
        granted = check_access_code(body.access_code, settings.ACCESS_CODE)
    except AccessCodeNotConfigured:
        logger.error("ACCESS_CODE environment variable is not set")
        return _respond(500, False, "Server configuration error")

    log_event("access_checked", {"granted": granted})
    if not granted:
        return _respond(401, False, "Invalid access code")
    return _respond(200, True, "Access granted")
