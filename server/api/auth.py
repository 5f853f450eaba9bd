# server/api/auth.py

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from server.api.deps import get_current_user, get_hasher, get_tokens
from server.core.security import PasswordHasher, TokenService
from server.database import get_db
from server.models import User
from server.services import auth as auth_service


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    data: dict = Body(...),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_tokens),
):
    result = auth_service.register(db, hasher, tokens, data)
    return {"message": "User registered successfully", **result}


@router.post("/login")
def login(
    data: dict = Body(...),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_tokens),
):
    result = auth_service.login(db, hasher, tokens, data)
    return {"message": "Login successful", **result}


@router.get("/me")
def read_users_me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"user": auth_service.current_user(db, current_user.id)}
