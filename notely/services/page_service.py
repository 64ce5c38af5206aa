# IMPORTS
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from notely.core.config import settings
from notely.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError, ValidationFailedError
from notely.models.block import Block
from notely.models.page import Page
from notely.models.tag import PageTag
from notely.services import ordering
from notely.services.ordering import block_scope, page_scope, serialized

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "updated_at": Page.updated_at,
    "created_at": Page.created_at,
    "title": Page.title,
    "position": Page.position,
}


def get_owned_page(db: Session, user_id: int, page_id: int) -> Page:
    """Chemin lecture: une page d'un autre user est traitée comme inexistante"""
    page = db.query(Page).filter(Page.id == page_id, Page.user_id == user_id).first()
    if not page:
        raise NotFoundError("Page not found")
    return page


def locate_page(db: Session, user_id: int, page_id: int) -> Page:
    """Chemin mutation: 404 si absente, 403 si elle appartient à un autre user"""
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise NotFoundError("Page not found")
    if page.user_id != user_id:
        logger.warning(f"User {user_id} denied access to page {page_id}")
        raise ForbiddenError()
    return page


# func 1: create_page()
def create_page(db: Session, user_id: int, title: Optional[str] = None) -> Page:
    scope = page_scope(user_id)
    with serialized(db, scope):
        page = Page(
            user_id=user_id,
            title=title or "Untitled",
            position=ordering.append_position(db, scope),
        )
        db.add(page)
    db.refresh(page)
    return page


# func 2: list_pages()
def list_pages(
    db: Session,
    user_id: int,
    search: Optional[str] = None,
    tag_ids: Optional[Sequence[int]] = None,
    sort_by: str = "updated_at",
    sort_order: str = "desc",
) -> List[Page]:
    query = db.query(Page).filter(Page.user_id == user_id, Page.is_deleted == False)

    # recherche dans le titre, insensible à la casse
    if search:
        query = query.filter(Page.title.ilike(f"%{search}%"))

    # au moins un des tags demandés
    if tag_ids:
        query = query.filter(Page.page_tags.any(PageTag.tag_id.in_(tag_ids)))

    column = SORT_FIELDS.get(sort_by)
    if column is None:
        raise ValidationFailedError(f"Cannot sort by '{sort_by}'")
    direction = asc if sort_order == "asc" else desc
    return query.order_by(direction(column), Page.id).all()


# func 3: get_page_with_blocks()
def get_page_with_blocks(db: Session, user_id: int, page_id: int, include_deleted: bool = False) -> Tuple[Page, List[Block]]:
    page = get_owned_page(db, user_id, page_id)

    query = db.query(Block).filter(Block.page_id == page_id)
    if not include_deleted:
        query = query.filter(Block.is_deleted == False)
    blocks = query.order_by(Block.position, Block.id).all()

    return page, blocks


# func 4: update_page()
def update_page(db: Session, user_id: int, page_id: int, title: str) -> Page:
    page = get_owned_page(db, user_id, page_id)
    page.title = title
    db.commit()
    db.refresh(page)
    return page


# func 5: delete_page() -> corbeille
def delete_page(db: Session, user_id: int, page_id: int) -> Page:
    page = locate_page(db, user_id, page_id)
    if page.is_deleted:
        raise InvalidStateError("Page is already in trash")

    with serialized(db, page_scope(user_id), block_scope(page_id)):
        db.refresh(page)
        if page.is_deleted:
            raise InvalidStateError("Page is already in trash")

        now = datetime.utcnow()
        vacated = page.position
        page.is_deleted = True
        page.deleted_at = now

        # les blocks actifs partent à la corbeille avec la page
        db.query(Block).filter(Block.page_id == page_id, Block.is_deleted == False).update(
            {Block.is_deleted: True, Block.deleted_at: now}, synchronize_session=False
        )
        ordering.repair_positions(db, page_scope(user_id), vacated)

    logger.info(f"Page {page_id} moved to trash")
    db.refresh(page)
    return page


# func 6: list_trash()
def list_trash(db: Session, user_id: int) -> List[Page]:
    return db.query(Page).filter(
        Page.user_id == user_id,
        Page.is_deleted == True
    ).order_by(desc(Page.deleted_at), Page.id).all()


# func 7: restore_page()
def restore_page(db: Session, user_id: int, page_id: int) -> Page:
    page = locate_page(db, user_id, page_id)
    if not page.is_deleted:
        raise InvalidStateError("Page is not deleted")

    scope = page_scope(user_id)
    with serialized(db, scope, block_scope(page_id)):
        db.refresh(page)
        if not page.is_deleted:
            raise InvalidStateError("Page is not deleted")

        if settings.RESTORE_POLICY == "append":
            page.position = ordering.append_position(db, scope)
        page.is_deleted = False
        page.deleted_at = None

        # tous les blocks de la corbeille reviennent, même ceux supprimés avant la page
        db.query(Block).filter(Block.page_id == page_id, Block.is_deleted == True).update(
            {Block.is_deleted: False, Block.deleted_at: None}, synchronize_session=False
        )
        if settings.RESTORE_POLICY == "append":
            ordering.compact(db, block_scope(page_id))

    logger.info(f"Page {page_id} restored (policy={settings.RESTORE_POLICY})")
    db.refresh(page)
    return page


# func 8: purge_page() -> suppression définitive
def purge_page(db: Session, user_id: int, page_id: int) -> None:
    page = locate_page(db, user_id, page_id)
    if not page.is_deleted:
        raise InvalidStateError("Page must be in trash before permanent deletion")

    scope = page_scope(user_id)
    with serialized(db, scope, block_scope(page_id)):
        db.refresh(page)
        if not page.is_deleted:
            raise InvalidStateError("Page must be in trash before permanent deletion")
        # cascade ORM: blocks + page_tags
        db.delete(page)
        ordering.compact(db, scope)

    logger.info(f"Page {page_id} permanently deleted")


# func 9: reorder_pages()
def reorder_pages(db: Session, user_id: int, page_ids: Sequence[int]) -> List[Page]:
    if not page_ids:
        raise ValidationFailedError("page_ids must not be empty")

    scope = page_scope(user_id)
    with serialized(db, scope):
        ordering.reorder(db, scope, page_ids)

    return ordering.active_items(db, scope)
