"""Data Transfer Objects for service layer"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storage.schemas import VideoRecord


class ErrorDTO(BaseModel):
    """Body of every non-2xx JSON response"""
    error: str


class FeedPageDTO(BaseModel):
    """One page of the /videos feed"""
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    has_more: bool = Field(alias="hasMore")
    total_count: Optional[int] = Field(default=None, alias="totalCount")
    videos: List[VideoRecord] = Field(default_factory=list)


class VideoListDTO(BaseModel):
    videos: List[VideoRecord]


class VideoDTO(BaseModel):
    video: VideoRecord


class VideoCreateDTO(BaseModel):
    """Create request; title and both URLs must be non-empty"""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    video_url: str = Field(..., min_length=1)
    thumbnail_url: str = Field(..., min_length=1)
    duration: Optional[int] = Field(default=None, ge=0)
    views: Optional[int] = Field(default=None, ge=0)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class VideoCreatedDTO(BaseModel):
    message: str = "Video metadata created"
    video: VideoRecord


class ViewsDTO(BaseModel):
    views: int


class ToggleLikeRequestDTO(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    user_id: Optional[str] = None


class ToggleLikeResponseDTO(BaseModel):
    liked: bool
    likes_count: int


class VideoUpdateDTO(BaseModel):
    """Partial update; only fields explicitly sent are applied"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    video_url: Optional[str] = Field(default=None, min_length=1)
    thumbnail_url: Optional[str] = Field(default=None, min_length=1)
    duration: Optional[int] = Field(default=None, ge=0)
    views: Optional[int] = Field(default=None, ge=0)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class BulkUpdateRequestDTO(BaseModel):
    video_ids: List[int] = Field(default_factory=list)
    updates: VideoUpdateDTO = Field(default_factory=VideoUpdateDTO)


class BulkUpdateResponseDTO(BaseModel):
    success: bool = True
    updated: int


class BulkDeleteRequestDTO(BaseModel):
    video_ids: List[int] = Field(default_factory=list)


class BulkDeleteResponseDTO(BaseModel):
    success: bool = True
    deleted: int


class VideoUploadDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    video_url: str


class ThumbnailUploadDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    thumbnail_url: str


class RootResponseDTO(BaseModel):
    message: str


class HealthResponseDTO(BaseModel):
    """Service layer DTO for health check responses"""
    ok: bool = True
    timestamp: Optional[str] = None
    version: Optional[str] = None
