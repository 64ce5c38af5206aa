"""Block service: CRUD + corbeille + ordre des blocks dans une page"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from notely.core.config import settings
from notely.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError, ValidationFailedError
from notely.models.block import Block
from notely.services import ordering
from notely.services.ordering import block_scope, serialized
from notely.services.page_service import get_owned_page, locate_page

logger = logging.getLogger(__name__)


def locate_block(db: Session, user_id: int, block_id: int) -> Block:
    # le propriétaire est celui de la page parente
    block = db.query(Block).filter(Block.id == block_id).first()
    if not block:
        raise NotFoundError("Block not found")
    if block.page.user_id != user_id:
        logger.warning(f"User {user_id} denied access to block {block_id}")
        raise ForbiddenError()
    return block


def create_block(
    db: Session,
    user_id: int,
    page_id: int,
    type: str,
    content: Dict[str, Any],
    position: Optional[int] = None,
) -> Block:
    """
    Ajoute un block à la page.

    Sans position: ajouté à la fin (position = nombre de blocks actifs).
    Avec position p (0 <= p <= n): inséré, les blocks à partir de p sont décalés.
    """
    page = get_owned_page(db, user_id, page_id)
    if page.is_deleted:
        raise InvalidStateError("Page is in trash")

    scope = block_scope(page_id)
    with serialized(db, scope):
        # la page a pu passer à la corbeille pendant l'attente du verrou
        db.refresh(page)
        if page.is_deleted:
            raise InvalidStateError("Page is in trash")
        count = ordering.active_count(db, scope)
        if position is None:
            position = count
        elif position < 0 or position > count:
            raise ValidationFailedError(f"Position must be between 0 and {count}")
        elif position < count:
            ordering.make_room(db, scope, position)

        block = Block(page_id=page_id, type=type, content=content, position=position)
        db.add(block)

    db.refresh(block)
    return block


def list_blocks(db: Session, user_id: int, page_id: int, search: Optional[str] = None) -> List[Block]:
    get_owned_page(db, user_id, page_id)
    blocks = ordering.active_items(db, block_scope(page_id))

    # recherche dans le contenu JSON
    if search:
        needle = search.lower()
        blocks = [b for b in blocks if needle in json.dumps(b.content, ensure_ascii=False).lower()]
    return blocks


def list_trashed_blocks(db: Session, user_id: int, page_id: int) -> List[Block]:
    get_owned_page(db, user_id, page_id)
    return db.query(Block).filter(
        Block.page_id == page_id,
        Block.is_deleted == True
    ).order_by(Block.deleted_at.desc(), Block.id).all()


def get_block(db: Session, user_id: int, block_id: int) -> Block:
    return locate_block(db, user_id, block_id)


def update_block(db: Session, user_id: int, block_id: int, type: Optional[str] = None,
                 content: Optional[Dict[str, Any]] = None) -> Block:
    # la position ne se modifie que par reorder
    block = locate_block(db, user_id, block_id)
    if type is not None:
        block.type = type
    if content is not None:
        block.content = content
    db.commit()
    db.refresh(block)
    return block


def delete_block(db: Session, user_id: int, block_id: int) -> Block:
    """Corbeille + réparation des positions de la page"""
    block = locate_block(db, user_id, block_id)
    if block.is_deleted:
        raise InvalidStateError("Block is already in trash")

    scope = block_scope(block.page_id)
    with serialized(db, scope):
        # position relue sous verrou, un autre delete a pu la décaler
        db.refresh(block)
        if block.is_deleted:
            raise InvalidStateError("Block is already in trash")
        vacated = block.position
        block.is_deleted = True
        block.deleted_at = datetime.utcnow()
        ordering.repair_positions(db, scope, vacated)

    db.refresh(block)
    return block


def restore_block(db: Session, user_id: int, block_id: int) -> Block:
    """
    Sort le block de la corbeille.

    RESTORE_POLICY=keep: la position n'est pas recalculée, elle peut doubler
    celle d'un block actif jusqu'au prochain reorder.
    RESTORE_POLICY=append: le block est remis à la fin.
    """
    block = locate_block(db, user_id, block_id)
    if not block.is_deleted:
        raise InvalidStateError("Block is not deleted")

    scope = block_scope(block.page_id)
    with serialized(db, scope):
        db.refresh(block)
        if not block.is_deleted:
            raise InvalidStateError("Block is not deleted")
        if settings.RESTORE_POLICY == "append":
            block.position = ordering.append_position(db, scope)
        block.is_deleted = False
        block.deleted_at = None

    db.refresh(block)
    return block


def purge_block(db: Session, user_id: int, block_id: int) -> None:
    block = locate_block(db, user_id, block_id)
    if not block.is_deleted:
        raise InvalidStateError("Block must be in trash before permanent deletion")

    scope = block_scope(block.page_id)
    with serialized(db, scope):
        db.refresh(block)
        if not block.is_deleted:
            raise InvalidStateError("Block must be in trash before permanent deletion")
        db.delete(block)
        # sa place a déjà été libérée lors du passage en corbeille
        ordering.compact(db, scope)

    logger.info(f"Block {block_id} permanently deleted")


def reorder_blocks(db: Session, user_id: int, page_id: int, block_ids: Sequence[int]) -> List[Block]:
    locate_page(db, user_id, page_id)
    if not block_ids:
        raise ValidationFailedError("block_ids must not be empty")

    scope = block_scope(page_id)
    with serialized(db, scope):
        ordering.reorder(db, scope, block_ids)

    return ordering.active_items(db, scope)
