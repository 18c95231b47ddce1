"""Pydantic schemas exchanged with the catalog store"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoRecord(BaseModel):
    """A catalog row as read back from the store"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    video_url: str
    thumbnail_url: str
    duration: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class NewVideo(BaseModel):
    """Insert payload; id and created_at are assigned by the store"""
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    video_url: str
    thumbnail_url: str
    duration: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class VideoQuery(BaseModel):
    """Filter / order / range for a list query"""
    category: Optional[str] = None
    created_after: Optional[datetime] = None
    order_by: str = "id"
    descending: bool = True
    offset: int = Field(default=0, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)
