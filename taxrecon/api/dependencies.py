from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taxrecon.core.config import settings

_bearer = HTTPBearer(auto_error=False)


def require_internal_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    """Only callers holding INTERNAL_API_TOKEN may trigger or inspect reports."""
    if credentials is None or not secrets.compare_digest(
        credentials.credentials, settings.INTERNAL_API_TOKEN
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid internal token")
