"""Tag service"""

from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from notely.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from notely.models.tag import PageTag, Tag
from notely.services.page_service import locate_page


def normalize_name(name: str) -> str:
    return name.strip().lower()


def locate_tag(db: Session, user_id: int, tag_id: int) -> Tag:
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise NotFoundError("Tag not found")
    if tag.user_id != user_id:
        raise ForbiddenError()
    return tag


def create_tag(db: Session, user_id: int, name: str) -> Tag:
    name = normalize_name(name)
    existing = db.query(Tag).filter(Tag.user_id == user_id, Tag.name == name).first()
    if existing:
        raise ConflictError(f'Tag "{name}" already exists')

    tag = Tag(user_id=user_id, name=name)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


def list_tags(db: Session, user_id: int) -> List[Tuple[Tag, int]]:
    """Tags de l'user triés par nom, avec le nombre de pages associées"""
    page_count = func.count(PageTag.page_id)
    return db.query(Tag, page_count).outerjoin(
        PageTag, PageTag.tag_id == Tag.id
    ).filter(
        Tag.user_id == user_id
    ).group_by(Tag.id).order_by(Tag.name).all()


def get_tag(db: Session, user_id: int, tag_id: int) -> Tuple[Tag, int]:
    tag = locate_tag(db, user_id, tag_id)
    count = db.query(PageTag).filter(PageTag.tag_id == tag.id).count()
    return tag, count


def delete_tag(db: Session, user_id: int, tag_id: int) -> None:
    tag = locate_tag(db, user_id, tag_id)
    # cascade: les associations page_tags partent avec
    db.delete(tag)
    db.commit()


def add_tag_to_page(db: Session, user_id: int, page_id: int, tag_id: int) -> PageTag:
    locate_page(db, user_id, page_id)
    locate_tag(db, user_id, tag_id)

    existing = db.query(PageTag).filter(PageTag.page_id == page_id, PageTag.tag_id == tag_id).first()
    if existing:
        raise ConflictError("Tag already added to this page")

    page_tag = PageTag(page_id=page_id, tag_id=tag_id)
    db.add(page_tag)
    db.commit()
    db.refresh(page_tag)
    return page_tag


def remove_tag_from_page(db: Session, user_id: int, page_id: int, tag_id: int) -> None:
    locate_page(db, user_id, page_id)
    locate_tag(db, user_id, tag_id)

    page_tag = db.query(PageTag).filter(PageTag.page_id == page_id, PageTag.tag_id == tag_id).first()
    if not page_tag:
        raise NotFoundError("Tag not found on this page")

    db.delete(page_tag)
    db.commit()


def get_page_tags(db: Session, user_id: int, page_id: int) -> List[Tag]:
    locate_page(db, user_id, page_id)
    return db.query(Tag).join(PageTag, PageTag.tag_id == Tag.id).filter(
        PageTag.page_id == page_id
    ).order_by(Tag.name).all()
