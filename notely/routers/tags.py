from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from notely.core.database import get_db
from notely.core.deps import get_current_user
from notely.models.user import User
from notely.schemas.tag import TagCreate, TagResponse, TagWithCount, PageTagResponse
from notely.services import tag_service
from typing import List

router = APIRouter(prefix="/tags", tags=["tags"])


def with_count(tag, count: int) -> TagWithCount:
    return TagWithCount(**TagResponse.model_validate(tag).model_dump(), page_count=count)

@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(tag_data: TagCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Nom unique par user, stocké en minuscules"""
    return tag_service.create_tag(db, current_user.id, tag_data.name)

@router.get("", response_model=List[TagWithCount])
def list_tags(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [with_count(tag, count) for tag, count in tag_service.list_tags(db, current_user.id)]

@router.get("/pages/{page_id}", response_model=List[TagResponse])
def get_page_tags(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return tag_service.get_page_tags(db, current_user.id, page_id)

@router.post("/pages/{page_id}/tags/{tag_id}", response_model=PageTagResponse, status_code=status.HTTP_201_CREATED)
def add_tag_to_page(page_id: int, tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return tag_service.add_tag_to_page(db, current_user.id, page_id, tag_id)

@router.delete("/pages/{page_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_tag_from_page(page_id: int, tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    tag_service.remove_tag_from_page(db, current_user.id, page_id, tag_id)

@router.get("/{tag_id}", response_model=TagWithCount)
def get_tag(tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    tag, count = tag_service.get_tag(db, current_user.id, tag_id)
    return with_count(tag, count)

@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # les associations avec les pages sont supprimées aussi
    tag_service.delete_tag(db, current_user.id, tag_id)
