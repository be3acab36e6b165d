"""Document Pydantic schemas."""

from datetime import datetime
from typing import Optional

from shift_manager.common.schemas import CamelModel


class DocumentCreate(CamelModel):
    name: Optional[str] = None
    type: Optional[str] = None
    size: Optional[str] = None
    path: Optional[str] = None
    thumbnail_path: Optional[str] = None


class DocumentResponse(CamelModel):
    id: int
    user_id: int
    name: str
    type: str
    size: str
    path: str
    thumbnail_path: Optional[str] = None
    created_at: Optional[datetime] = None
