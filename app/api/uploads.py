from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.deps.common import get_object_store, get_trace_id
from service.dto import ErrorDTO, ThumbnailUploadDTO, VideoUploadDTO
from service.upload_service import THUMBNAIL, VIDEO, upload_asset
from storage.clients.object_store import ObjectStoreClient

router = APIRouter(prefix="/upload", tags=["uploads"])

ERRORS = {400: {"model": ErrorDTO}, 500: {"model": ErrorDTO}}


async def _read(upload: Optional[UploadFile]) -> Optional[bytes]:
    return await upload.read() if upload is not None else None


@router.post("/video", response_model=VideoUploadDTO, responses=ERRORS)
async def upload_video(
    video: Optional[UploadFile] = File(None),
    objects: ObjectStoreClient = Depends(get_object_store),
    trace_id: str = Depends(get_trace_id)
) -> VideoUploadDTO:
    """Store a video file (multipart field `video`) in the videos bucket"""
    file_name, public_url = await upload_asset(
        objects,
        VIDEO,
        bucket=objects.settings.video_bucket,
        original_name=video.filename if video is not None else None,
        content_type=video.content_type if video is not None else None,
        data=await _read(video),
        trace_id=trace_id
    )
    return VideoUploadDTO(file_name=file_name, video_url=public_url)


@router.post("/thumbnail", response_model=ThumbnailUploadDTO, responses=ERRORS)
async def upload_thumbnail(
    thumbnail: Optional[UploadFile] = File(None),
    objects: ObjectStoreClient = Depends(get_object_store),
    trace_id: str = Depends(get_trace_id)
) -> ThumbnailUploadDTO:
    """Store a thumbnail image (multipart field `thumbnail`) in the thumbnails bucket"""
    file_name, public_url = await upload_asset(
        objects,
        THUMBNAIL,
        bucket=objects.settings.thumbnail_bucket,
        original_name=thumbnail.filename if thumbnail is not None else None,
        content_type=thumbnail.content_type if thumbnail is not None else None,
        data=await _read(thumbnail),
        trace_id=trace_id
    )
    return ThumbnailUploadDTO(file_name=file_name, thumbnail_url=public_url)
