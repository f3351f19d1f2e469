"""Middleware: API key authentication."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:
    from faceident.config import Settings

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)
_header_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def _presented_key(credentials: HTTPAuthorizationCredentials | None, header_key: str | None) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return header_key


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    header_key: Annotated[str | None, Security(_header_scheme)],
) -> None:
    """Check the presented key against the configured API key.

    If no API key is configured (FACEIDENT_API_KEY not set), all requests pass.
    Otherwise requests must send 'Authorization: Bearer <key>' or 'X-API-Key: <key>'.
    """
    settings: Settings = request.app.state.settings
    if settings.api_key is None:
        return

    presented = _presented_key(credentials, header_key)
    if presented is None or not secrets.compare_digest(presented.encode(), settings.api_key.encode()):
        logger.warning("Rejected request to %s: invalid or missing API key", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
