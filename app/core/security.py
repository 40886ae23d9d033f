"""Security related functions: password hashing and bearer tokens."""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.exceptions.base import AuthenticationError

logger = logging.getLogger(__name__)

# Argon2id is memory-hard; passlib keeps older hashes verifiable if schemes change
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash.

    Malformed hashes are treated as a mismatch rather than an error.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning("Password verification failed on malformed hash: %s", str(e))
        return False


class TokenExpiredError(AuthenticationError):
    """The bearer token was valid but its expiry has passed."""

    def __init__(self, message: str = "Not authorized, token expired"):
        super().__init__(message=message, error_code="TOKEN_EXPIRED")


class TokenInvalidError(AuthenticationError):
    """The bearer token is malformed, tampered with or lacks a subject."""

    def __init__(self, message: str = "Not authorized, token failed"):
        super().__init__(message=message, error_code="TOKEN_INVALID")


class TokenManager:
    """
    Issues and validates signed access tokens.

    A token carries the user's identifier in the ``id`` claim and an ``exp``
    claim. Validation yields the identifier or raises one of the two token
    errors so callers can tell an expired session from a forged one.

    :ivar secret_key: HMAC secret used to sign tokens.
    :type secret_key: str
    :ivar algorithm: JWT signing algorithm.
    :type algorithm: str
    """

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ):
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes

    def create_access_token(self, user_id: UUID, expires_delta: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {"id": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> UUID:
        """
        Decode a token and return the user identifier it was issued for.

        :param token: The raw JWT from the Authorization header.
        :return: The user id carried in the token.
        :raises TokenExpiredError: if the signature is valid but ``exp`` has passed.
        :raises TokenInvalidError: for any other decoding failure.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.info("Rejected bearer token: %s", str(e))
            raise TokenInvalidError() from e

        user_id = payload.get("id")
        if not user_id:
            raise TokenInvalidError("Invalid token payload - missing user ID")
        try:
            return UUID(str(user_id))
        except ValueError as e:
            raise TokenInvalidError("Invalid token payload - malformed user ID") from e


token_manager = TokenManager()
