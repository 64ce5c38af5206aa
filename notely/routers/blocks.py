from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from notely.core.database import get_db
from notely.core.deps import get_current_user
from notely.models.user import User
from notely.schemas.block import BlockCreate, BlockUpdate, BlockReorder, BlockResponse
from notely.services import block_service
from typing import List, Optional

router = APIRouter(prefix="/blocks", tags=["blocks"])

@router.post("/pages/{page_id}/blocks", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def create_block(page_id: int, block_data: BlockCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Créer un block dans une page"""
    return block_service.create_block(
        db,
        current_user.id,
        page_id,
        type=block_data.type.value,
        content=block_data.content,
        position=block_data.position
    )

@router.get("/pages/{page_id}/blocks", response_model=List[BlockResponse])
def list_blocks(page_id: int, search: Optional[str] = None, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Blocks actifs d'une page, triés par position"""
    return block_service.list_blocks(db, current_user.id, page_id, search)

@router.get("/pages/{page_id}/trash", response_model=List[BlockResponse])
def list_trashed_blocks(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return block_service.list_trashed_blocks(db, current_user.id, page_id)

@router.post("/pages/{page_id}/reorder", response_model=List[BlockResponse])
def reorder_blocks(page_id: int, data: BlockReorder, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Réordonner les blocks: position = index dans block_ids"""
    return block_service.reorder_blocks(db, current_user.id, page_id, data.block_ids)

@router.get("/{block_id}", response_model=BlockResponse)
def get_block(block_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return block_service.get_block(db, current_user.id, block_id)

@router.patch("/{block_id}", response_model=BlockResponse)
def update_block(block_id: int, block_data: BlockUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Modifier le type et/ou le contenu d'un block"""
    return block_service.update_block(
        db,
        current_user.id,
        block_id,
        type=block_data.type.value if block_data.type else None,
        content=block_data.content
    )

@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_block(block_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Supprimer un block (soft delete)"""
    block_service.delete_block(db, current_user.id, block_id)

@router.post("/{block_id}/restore", response_model=BlockResponse)
def restore_block(block_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return block_service.restore_block(db, current_user.id, block_id)

@router.delete("/{block_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def purge_block(block_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Suppression définitive, le block doit être dans la corbeille"""
    block_service.purge_block(db, current_user.id, block_id)
