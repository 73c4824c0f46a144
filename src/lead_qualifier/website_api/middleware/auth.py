"""Request authentication for the scoring API."""

import hmac
import hashlib
import logging
from fastapi import Request, HTTPException
from ..config import settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-LQ-Signature"
SECRET_HEADER = "X-LQ-Secret"


def sign_body(body: bytes) -> str:
    """Hex HMAC-SHA256 of a request body keyed with LQ_API_SECRET."""
    return hmac.new(settings.api_secret.encode(), body, hashlib.sha256).hexdigest()


async def verify_signature(request: Request):
    """Accept a body signature or the shared secret, in that order.

    Senders that can sign (webhooks, form backends) should prefer
    X-LQ-Signature; X-LQ-Secret exists for internal tools and curl.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if signature and hmac.compare_digest(signature, sign_body(await request.body())):
        return True

    secret = request.headers.get(SECRET_HEADER)
    if secret and hmac.compare_digest(secret, settings.api_secret):
        return True

    logger.warning(f"Rejected unauthenticated request to {request.url.path}")
    raise HTTPException(
        status_code=401,
        detail={"success": False, "error": "auth_error", "detail": "Invalid or missing authentication"},
    )
