from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


def _client_key(request: Request) -> str:
    api_key = (request.headers.get("X-API-Key") or "").strip()
    if api_key:
        return f"key:{api_key}"
    return get_remote_address(request)


limiter = Limiter(key_func=_client_key)


def rate_limit(limit_value: str | None = None):
    """slowapi limit for an endpoint, or a pass-through when limiting is disabled."""
    if not settings.rate_limit_enabled:
        return lambda func: func
    return limiter.limit(limit_value or settings.rate_limit)
