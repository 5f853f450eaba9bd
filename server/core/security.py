# server/core/security.py

import logging
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from server.errors import ConfigurationError, InvalidToken


logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(days=7)


# -------------------------------
# Password hashing
# -------------------------------

class PasswordHasher:
    """
    Thin wrapper over a passlib bcrypt context so the cost factor can be
    configured (tests run with the minimum of 4 rounds).
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # unknown or corrupt hash
            return False


# -------------------------------
# Tokens
# -------------------------------

class TokenService:
    """
    Issues and verifies HS256 JWTs whose subject is the user id.
    """

    def __init__(self, secret: str | None, expires_in: timedelta = ACCESS_TOKEN_EXPIRE):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not configured. Please set it in your .env file.")
        self._secret = secret
        self.expires_in = expires_in

    def issue(self, user_id: str, expires_in: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_in if expires_in is not None else self.expires_in)
        claims = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        """
        Returns the user id carried by ``token``. Malformed, tampered and
        expired tokens all raise InvalidToken.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.debug("Rejected token: %s", e)
            raise InvalidToken() from e

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidToken()
        return user_id
