from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from notely.core.database import get_db
from notely.core.deps import get_current_user
from notely.models.user import User
from notely.schemas.block import BlockResponse
from notely.schemas.page import PageCreate, PageUpdate, PageReorder, PageResponse, PageWithBlocks
from notely.services import page_service
from typing import List, Literal, Optional

router = APIRouter(prefix="/pages", tags=["pages"])


def with_blocks(page, blocks) -> PageWithBlocks:
    # page.blocks contient aussi la corbeille, on passe la liste filtrée
    data = PageResponse.model_validate(page).model_dump()
    return PageWithBlocks(**data, blocks=[BlockResponse.model_validate(b) for b in blocks])

def active_blocks(page):
    return sorted((b for b in page.blocks if not b.is_deleted), key=lambda b: (b.position, b.id))

# Crée une page (ajoutée en dernière position)
@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(page_data: PageCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return page_service.create_page(db, current_user.id, page_data.title)

@router.get("", response_model=List[PageWithBlocks])
def list_pages(
    search: Optional[str] = None,
    tag_ids: List[int] = Query(default=[]),
    sort_by: Literal["updated_at", "created_at", "title", "position"] = "updated_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    # pages actives de l'user, filtrées par titre et/ou tags, avec leurs blocks actifs
    pages = page_service.list_pages(db, current_user.id, search, tag_ids, sort_by, sort_order)
    return [with_blocks(page, active_blocks(page)) for page in pages]

@router.get("/trash", response_model=List[PageWithBlocks])
def list_trash(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # corbeille: plus récemment supprimées d'abord, avec leurs blocks supprimés
    pages = page_service.list_trash(db, current_user.id)
    return [with_blocks(page, [b for b in page.blocks if b.is_deleted]) for page in pages]

@router.post("/reorder", response_model=List[PageResponse])
def reorder_pages(data: PageReorder, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return page_service.reorder_pages(db, current_user.id, data.page_ids)

@router.get("/{page_id}", response_model=PageWithBlocks)
def get_page(page_id: int, include_deleted: bool = False, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Récup une page + ses blocks ordonnés
    page, blocks = page_service.get_page_with_blocks(db, current_user.id, page_id, include_deleted)
    return with_blocks(page, blocks)

@router.patch("/{page_id}", response_model=PageResponse)
def update_page(page_id: int, page_data: PageUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return page_service.update_page(db, current_user.id, page_id, page_data.title)

@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # corbeille, les blocks suivent
    page_service.delete_page(db, current_user.id, page_id)

@router.post("/{page_id}/restore", response_model=PageResponse)
def restore_page(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return page_service.restore_page(db, current_user.id, page_id)

@router.delete("/{page_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def purge_page(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    page_service.purge_page(db, current_user.id, page_id)
