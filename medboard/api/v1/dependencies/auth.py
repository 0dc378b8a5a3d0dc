"""Bearer authentication dependency for protected endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from medboard.api.v1.dependencies.services import get_session_manager
from medboard.application.dtos.user import UserRecord
from medboard.application.services import SessionLifecycleManager
from medboard.domain.exceptions import InvalidTokenException

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    sessions: Annotated[SessionLifecycleManager, Depends(get_session_manager)],
) -> UserRecord:
    """Return the user behind the bearer access token.

    The user is re-read and gated on every request, so deactivation or a
    revoked approval takes effect before the access token expires.
    Raises InvalidTokenException (401) when the header is missing or invalid.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenException("Not authenticated")
    return await sessions.authenticate_access_token(credentials.credentials)


CurrentUser = Annotated[UserRecord, Depends(get_current_user)]
