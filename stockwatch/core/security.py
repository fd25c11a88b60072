from __future__ import annotations

import hmac
from typing import Optional

from fastapi import HTTPException, status

from stockwatch.config import Settings, get_settings


def _load_api_keys(settings: Settings) -> set[str]:
    keys = set()
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if value:
                keys.add(value)
    return keys


def _matches_any(candidate: str, keys: set[str]) -> bool:
    found = False
    for key in keys:
        if hmac.compare_digest(candidate.encode("utf-8"), key.encode("utf-8")):
            found = True
    return found


def authenticate_request(
    api_key: Optional[str],
    settings: Optional[Settings] = None,
) -> Optional[dict]:
    """Return the caller's auth context, or None when no keys are configured.

    Without ``API_KEYS`` the service runs open, which is what local
    development expects.
    """
    keys = _load_api_keys(settings or get_settings())
    if not keys:
        return None

    api_key = (api_key or "").strip()
    if api_key and _matches_any(api_key, keys):
        return {"auth_type": "api_key"}

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
