import secrets
from typing import Optional
from fastapi import Header, HTTPException

from .config import settings


def require_admin_key(x_admin_key: Optional[str] = Header(None)) -> None:
    """
    Dependency guarding administrative JSON endpoints (room catalogue, booking edits).
    Disabled entirely while ADMIN_API_KEY is unset.
    """
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Administrative API is disabled")
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.ADMIN_API_KEY):
        raise HTTPException(status_code=401, detail="Invalid admin key")
