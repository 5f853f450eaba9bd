# server/services/profile.py

import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from server.errors import DuplicateEmail, NotFound
from server.models import User
from server.schemas import ProfileUpdate, UserOut, parse_model


logger = logging.getLogger(__name__)


def _load(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def get_profile(db: Session, user_id: str) -> dict:
    return UserOut.model_validate(_load(db, user_id)).to_json()


def update_profile(db: Session, user_id: str, data: dict) -> dict:
    """
    Applies the provided name/email/avatar fields. A changed email must
    not belong to any other account.
    """
    req = parse_model(ProfileUpdate, data)
    user = _load(db, user_id)
    fields = req.model_fields_set

    if "email" in fields and req.email != user.email:
        taken = db.scalars(
            select(User.id).where(User.email == req.email, User.id != user.id)
        ).first()
        if taken:
            raise DuplicateEmail("Email is already taken by another user")
        user.email = req.email
    if "name" in fields:
        user.name = req.name
    if "avatar" in fields:
        user.avatar = req.avatar

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail("Email is already taken by another user")
    db.refresh(user)

    logger.info("Updated profile of user %s", user.id)
    return UserOut.model_validate(user).to_json()
