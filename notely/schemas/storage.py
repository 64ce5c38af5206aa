from pydantic import BaseModel
from typing import Optional

class UploadResult(BaseModel):
    public_id: str
    secure_url: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: str
    bytes: int
    resource_type: str
