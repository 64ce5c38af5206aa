from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List
from notely.schemas.block import BlockResponse
from notely.schemas.tag import TagResponse

# Schemas pour les pages

class PageCreate(BaseModel):
    title: Optional[str] = None  # "Untitled" par défaut

class PageUpdate(BaseModel):
    title: str

class PageReorder(BaseModel):
    page_ids: List[int] = Field(min_length=1)

class PageResponse(BaseModel):
    id: int
    user_id: int
    title: str
    position: int
    is_deleted: bool
    deleted_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    tags: List[TagResponse] = []

    model_config = ConfigDict(from_attributes=True)

class PageWithBlocks(PageResponse):
    blocks: List[BlockResponse] = []
