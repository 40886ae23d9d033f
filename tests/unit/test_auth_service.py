"""Unit tests for AuthService."""

import uuid
from datetime import timedelta

import pytest

from app.core.security import TokenExpiredError, TokenInvalidError, token_manager
from app.domains.auth.service import AuthService
from app.exceptions.project import InvalidCredentialsError, UserAlreadyExistsError
from app.schemas.user import UserLoginRequest, UserRegisterRequest
from tests.factories import TEST_PASSWORD


@pytest.fixture
def service(test_db):
    return AuthService(test_db)


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, service):
        user, token = await service.register(
            UserRegisterRequest(name=" Dana ", email="Dana@Example.com", password="secret1")
        )

        assert user.name == "Dana"
        assert user.email == "dana@example.com"
        assert user.role == "user"
        assert user.password_hash != "secret1"
        assert token_manager.verify_token(token) == user.id

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service, test_user):
        with pytest.raises(UserAlreadyExistsError):
            await service.register(
                UserRegisterRequest(name="Alice Again", email="ALICE@example.com", password="secret1")
            )

    def test_short_password_rejected(self):
        with pytest.raises(ValueError, match="at least 6 characters"):
            UserRegisterRequest(name="Dana", email="dana@example.com", password="123")


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_with_valid_credentials(self, service, test_user):
        user, token = await service.login(UserLoginRequest(email="alice@example.com", password=TEST_PASSWORD))

        assert user.id == test_user.id
        assert token_manager.verify_token(token) == test_user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password",
        [("alice@example.com", "wrong-password"), ("nobody@example.com", TEST_PASSWORD)],
    )
    async def test_bad_credentials_share_one_error(self, service, test_user, email, password):
        with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
            await service.login(UserLoginRequest(email=email, password=password))


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_resolves_user(self, service, test_user):
        token = token_manager.create_access_token(test_user.id)

        assert (await service.authenticate(token)).id == test_user.id

    @pytest.mark.asyncio
    async def test_deleted_user(self, service):
        token = token_manager.create_access_token(uuid.uuid4())

        with pytest.raises(TokenInvalidError, match="user not found"):
            await service.authenticate(token)

    @pytest.mark.asyncio
    async def test_expired_token(self, service, test_user):
        token = token_manager.create_access_token(test_user.id, expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenExpiredError):
            await service.authenticate(token)
