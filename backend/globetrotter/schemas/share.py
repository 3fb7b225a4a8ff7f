"""
Pydantic schemas for sharing.
"""
from pydantic import BaseModel
from datetime import datetime


class ShareResponse(BaseModel):
    """Schema returned when a share token is issued."""
    share_token: str
    share_url: str


class ShareRecordResponse(BaseModel):
    """Schema for one entry of a trip's share history."""
    id: int
    token: str
    shared_by: int
    view_count: int
    created_at: datetime

    class Config:
        from_attributes = True
