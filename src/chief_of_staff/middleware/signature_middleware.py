from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Callable
import logging
import os

from chief_of_staff.utils.request_security import RequestSecurity

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Chat-Signature"
PROTECTED_PREFIXES = ("/chat", "/classify")


async def verify_chat_signature(request: Request, call_next: Callable):
    """
    Middleware to verify signed chat requests.

    Checks:
    - X-Chat-Signature header
    - Signature validity using CHAT_API_SECRET

    Verification is skipped when CHAT_API_SECRET is not configured.
    """
    if not request.url.path.startswith(PROTECTED_PREFIXES):
        return await call_next(request)

    secret = os.getenv("CHAT_API_SECRET")
    if not secret:
        return await call_next(request)

    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    if not RequestSecurity.verify_signature(
        body,
        signature or "",
        secret
    ):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Invalid chat signature from {client}")
        return JSONResponse(status_code=401, content={"detail": "Invalid request signature"})

    return await call_next(request)
