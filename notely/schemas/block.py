from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, Any, List

class BlockType(str, Enum):
    TEXT = "TEXT"
    HEADING = "HEADING"
    CHECKLIST = "CHECKLIST"
    IMAGE = "IMAGE"
    FILE = "FILE"

class BlockCreate(BaseModel):
    """Créer un block, ajouté en fin de page si position est absente"""
    type: BlockType = BlockType.TEXT
    content: dict[str, Any] = Field(min_length=1)  # ex: {"text": "Hello", "bold": false}
    position: Optional[int] = Field(default=None, ge=0)

class BlockUpdate(BaseModel):
    """Modifier un block (la position passe par /reorder)"""
    type: Optional[BlockType] = None
    content: Optional[dict[str, Any]] = None

class BlockReorder(BaseModel):
    """Ids des blocks actifs de la page, dans le nouvel ordre"""
    block_ids: List[int] = Field(min_length=1)

class BlockResponse(BaseModel):
    """Block retourné"""
    id: int
    page_id: int
    type: BlockType
    content: dict[str, Any]
    position: int
    is_deleted: bool
    deleted_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
