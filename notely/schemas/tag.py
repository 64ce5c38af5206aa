from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)

class TagResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class TagWithCount(TagResponse):
    page_count: int = 0

class PageTagResponse(BaseModel):
    page_id: int
    tag_id: int
    tag: TagResponse

    model_config = ConfigDict(from_attributes=True)
