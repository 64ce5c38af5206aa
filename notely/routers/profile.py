from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from notely.core.database import get_db
from notely.core.deps import get_current_user
from notely.models.user import User
from notely.schemas.user import UserResponse, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user

@router.patch("", response_model=UserResponse)
def update_profile(data: ProfileUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Modifier le nom et/ou l'avatar"""
    if data.name is not None:
        current_user.name = data.name
    if data.avatar is not None:
        current_user.avatar = str(data.avatar)
    db.commit()
    db.refresh(current_user)
    return current_user
