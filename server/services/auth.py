# server/services/auth.py

import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from server.core.security import PasswordHasher, TokenService
from server.errors import DuplicateEmail, InvalidCredentials, NotFound
from server.models import User
from server.schemas import LoginRequest, RegisterRequest, UserOut, parse_model


logger = logging.getLogger(__name__)


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def register(db: Session, hasher: PasswordHasher, tokens: TokenService, data: dict) -> dict:
    """
    Creates an account and returns ``{"token", "user"}``.
    """
    req = parse_model(RegisterRequest, data)

    if find_user_by_email(db, req.email):
        raise DuplicateEmail()

    user = User(name=req.name, email=req.email, hashed_password=hasher.hash(req.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return {"token": tokens.issue(user.id), "user": UserOut.model_validate(user).to_json()}


def login(db: Session, hasher: PasswordHasher, tokens: TokenService, data: dict) -> dict:
    req = parse_model(LoginRequest, data)

    user = find_user_by_email(db, req.email)
    if not user or not hasher.verify(req.password, user.hashed_password):
        logger.info("Failed login attempt for %s", req.email)
        raise InvalidCredentials()

    logger.info("User %s logged in", user.id)
    return {"token": tokens.issue(user.id), "user": UserOut.model_validate(user).to_json()}


def current_user(db: Session, user_id: str) -> dict:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return UserOut.model_validate(user).to_json()
