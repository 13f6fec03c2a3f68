"""
Unit tests for AuthService: password hashing, token issue and verification.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import jwt
import pytest

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.services.auth import AuthService, user_store
from tests.helpers import TEST_SECRET_KEY
from tests.utils_jwt import generate_test_jwt


@pytest.fixture
def auth_service():
    return AuthService(Settings(SECRET_KEY=TEST_SECRET_KEY))


class TestPasswords:

    def test_password_hashing_and_verification(self):
        """
        Test password hashing and verification works correctly.
        """
        # Arrange: A test password
        password = "secure_password123"

        # Act: Hash the password
        hashed = AuthService.get_password_hash(password)

        # Assert: Hash should be valid and verifiable
        assert isinstance(hashed, str)
        assert hashed != password
        assert AuthService.verify_password(password, hashed) is True
        assert AuthService.verify_password("wrong_password", hashed) is False

    def test_long_password(self):
        password = "x" * 100
        hashed = AuthService.get_password_hash(password)
        assert AuthService.verify_password(password, hashed) is True


class TestTokens:

    def test_access_token_claims(self, auth_service):
        token = auth_service.create_access_token(SimpleNamespace(id=5, username="ana"))

        payload = jwt.decode(token, TEST_SECRET_KEY, algorithms=["HS256"])

        assert payload["sub"] == "5"
        assert payload["username"] == "ana"
        assert payload["exp"] - payload["iat"] == 60 * 60

    def test_expired_token(self, auth_service):
        token = generate_test_jwt(expires_in=timedelta(minutes=-5))

        with pytest.raises(AuthorizationError):
            auth_service.decode_access_token(token)

    def test_badly_signed_token(self, auth_service):
        token = generate_test_jwt(secret="some-other-secret")

        with pytest.raises(AuthorizationError):
            auth_service.decode_access_token(token)

    def test_malformed_token(self, auth_service):
        with pytest.raises(AuthorizationError):
            auth_service.decode_access_token("not.a.token")


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_missing_credential_is_401(self, auth_service):
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.authenticate(None, None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_token_for_missing_user_is_403(self, auth_service):
        token = generate_test_jwt(user_id=42)

        with patch.object(user_store, "get", AsyncMock(return_value=None)):
            with pytest.raises(AuthorizationError) as exc_info:
                await auth_service.authenticate(None, token)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_valid_token_binds_identity(self, auth_service):
        token = generate_test_jwt(user_id=42, username="ana")
        user = SimpleNamespace(id=42, username="ana")

        with patch.object(user_store, "get", AsyncMock(return_value=user)) as mock_get:
            current_user = await auth_service.authenticate(None, token)

        mock_get.assert_awaited_once_with(None, 42)
        assert current_user.id == 42
        assert current_user.username == "ana"
