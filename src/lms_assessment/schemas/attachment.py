# File: src/lms_assessment/schemas/attachment.py

from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime

from ..models.attachment import OwnerType

class AttachmentCreate(BaseModel):
    # the file itself is already in storage; this is its reference
    file_name: str
    file_url: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    description: Optional[str] = None
    sort_order: int = 0

class AttachmentRead(BaseModel):
    id: UUID
    owner_type: OwnerType
    owner_id: UUID
    file_name: str
    file_url: str
    file_size: Optional[int]
    file_type: Optional[str]
    mime_type: Optional[str]
    uploaded_by: UUID
    sort_order: int
    created_at: datetime

    class Config:
        from_attributes = True
