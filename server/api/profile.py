# server/api/profile.py

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from server.api.deps import get_current_user
from server.database import get_db
from server.models import User
from server.services import profile as profile_service


router = APIRouter(prefix="/profile", tags=["profile"], dependencies=[Depends(get_current_user)])


@router.get("")
def read_profile(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"user": profile_service.get_profile(db, current_user.id)}


@router.put("")
def update_profile(
    data: dict = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = profile_service.update_profile(db, current_user.id, data)
    return {"message": "Profile updated successfully", "user": user}
