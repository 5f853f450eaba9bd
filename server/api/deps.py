# server/api/deps.py

import logging
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from server.core.security import PasswordHasher, TokenService
from server.database import get_db
from server.errors import InvalidToken, Unauthenticated
from server.models import User


logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_tokens),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolves the bearer token to a stored user and attaches it to
    ``request.state.user``. Every failure is reported as the same 401.
    """
    if not token:
        raise Unauthenticated()
    try:
        user_id = tokens.verify(token)
    except InvalidToken:
        raise Unauthenticated("Invalid token. Please login again.")

    user = db.get(User, user_id)
    if user is None:
        logger.debug("Token for unknown user %s", user_id)
        raise Unauthenticated("User not found with this token")

    request.state.user = user
    return user
