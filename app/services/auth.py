from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from app.models.user import User
from app.schemas.auth import CurrentUser, Token, TokenPayload
from app.services.base import AsyncBaseService
from app.utils.logger import auth_logger

user_store = AsyncBaseService(User, "User")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class AuthService:
    """
    Registration, login and bearer-token verification.

    One instance per application, bound to that application's settings.
    """

    _dummy_hash: Optional[str] = None

    def __init__(self, settings: Settings):
        self.settings = settings

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return bcrypt.checkpw(_encode_password(plain_password), hashed_password.encode("utf-8"))

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password for storage."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(_encode_password(password), salt)
        return hashed.decode("utf-8")

    @classmethod
    def dummy_hash(cls) -> str:
        """Hash compared against when the username is unknown, so both paths cost one bcrypt check."""
        if cls._dummy_hash is None:
            cls._dummy_hash = cls.get_password_hash("placeholder-password")
        return cls._dummy_hash

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        """Create a new JWT access token."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user.id),
            "username": user.username,
            "iat": now,
            "exp": now + expires_delta,
        }

        return jwt.encode(
            to_encode,
            self.settings.SECRET_KEY,
            algorithm=self.settings.JWT_ALGORITHM,
        )

    def decode_access_token(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry of a token.

        Raises:
            AuthorizationError: malformed, badly signed or expired token
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.SECRET_KEY,
                algorithms=[self.settings.JWT_ALGORITHM],
            )
            return TokenPayload(**payload)
        except jwt.ExpiredSignatureError as e:
            auth_logger.warning("Expired token presented", context="verify")
            raise AuthorizationError() from e
        except (jwt.PyJWTError, PydanticValidationError) as e:
            auth_logger.warning(f"Rejected token: {e}", context="verify")
            raise AuthorizationError() from e

    @staticmethod
    async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def register(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises:
            ValidationError: blank username or password
            ConflictError: username already taken
        """
        if not username or not username.strip() or not password:
            raise ValidationError("Username and password are required.")

        if await self.get_user_by_username(db, username) is not None:
            raise ConflictError("Username already exists.")

        try:
            user = await user_store.create(
                db,
                obj_in={"username": username, "hashed_password": self.get_password_hash(password)},
            )
        except ConflictError as e:
            # Lost a race with a concurrent registration of the same name
            raise ConflictError("Username already exists.") from e

        auth_logger.success("User registered", context="register", user_id=user.id)
        return user

    async def login(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> Token:
        """
        Check credentials and issue an access token.

        Raises:
            ValidationError: blank username or password
            AuthenticationError: unknown user or wrong password
        """
        if not username or not password:
            raise ValidationError("Username and password are required.")

        user = await self.get_user_by_username(db, username)
        if user is None:
            self.verify_password(password, self.dummy_hash())
            auth_logger.warning("Login failed", context="login")
            raise AuthenticationError("Invalid credentials")

        if not self.verify_password(password, user.hashed_password):
            auth_logger.warning("Login failed", context="login", user_id=user.id)
            raise AuthenticationError("Invalid credentials")

        auth_logger.info("User logged in", context="login", user_id=user.id)
        return Token(
            token=self.create_access_token(user),
            expires_in=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    async def authenticate(self, db: AsyncSession, token: Optional[str]) -> CurrentUser:
        """
        Resolve a bearer token to the identity it was issued for.

        Raises:
            AuthenticationError: no token supplied
            AuthorizationError: invalid token, or its user no longer exists
        """
        if not token:
            raise AuthenticationError()

        payload = self.decode_access_token(token)

        try:
            user_id = int(payload.sub)
        except ValueError as e:
            raise AuthorizationError() from e

        user = await user_store.get(db, user_id)
        if user is None:
            auth_logger.warning("Token for unknown user", context="verify", user_id=user_id)
            raise AuthorizationError()

        return CurrentUser(id=user.id, username=user.username)
