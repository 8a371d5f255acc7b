"""
Request guards shared by every route.

The `X-API-KEY` check only applies when `API_KEYS` is set. Health and docs
routes are always reachable.
"""

import hmac
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Header, HTTPException, Request, status

load_dotenv()

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/", "/health", "/docs", "/docs/oauth2-redirect", "/openapi.json", "/redoc"})


def get_api_keys() -> List[str]:
    """Comma-separated keys from API_KEYS, read on every request."""
    return [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]


def _key_matches(candidate: str, valid_keys: List[str]) -> bool:
    return any(hmac.compare_digest(candidate, k) for k in valid_keys)


async def api_key_protection(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY"),
) -> None:
    valid_keys = get_api_keys()
    if not valid_keys or request.url.path in PUBLIC_PATHS:
        return

    candidate = (x_api_key or "").strip()
    if candidate and _key_matches(candidate, valid_keys):
        return

    logger.info("Rejected %s %s: %s API key", request.method, request.url.path, "bad" if candidate else "missing")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API Key")
