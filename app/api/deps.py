"""
API dependency injection module.

The auth service and the attachment manager belong to the running
application (``app.state``); endpoints reach them only through these
dependencies.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.async_session import get_async_db
from app.schemas.auth import CurrentUser
from app.services.attachments import AttachmentManager
from app.services.auth import AuthService

# auto_error off: a missing header is reported as 401 by the auth service,
# not as FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_attachment_manager(request: Request) -> AttachmentManager:
    return request.app.state.attachments


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        AuthenticationError: no bearer token on the request
        AuthorizationError: token invalid, expired or for a deleted user
    """
    token = credentials.credentials if credentials else None
    return await auth_service.authenticate(db, token)
