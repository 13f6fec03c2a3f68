from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_auth_service
from app.db.async_session import get_async_db
from app.schemas.auth import Token, UserLogin, UserRegister, UserResponse
from app.services.auth import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_async_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    """
    Register a new user with username and password.
    The password is stored only as a bcrypt hash.
    """
    return await auth_service.register(db, user_data.username, user_data.password)


@router.post("/login", response_model=Token)
async def login(
    user_data: UserLogin,
    db: AsyncSession = Depends(get_async_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    """Exchange username and password for a bearer token valid for one hour."""
    return await auth_service.login(db, user_data.username, user_data.password)
