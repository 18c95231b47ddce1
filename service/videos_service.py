"""Video catalog operations: lookups, create, views, likes and bulk changes"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from service.dto import (
    BulkDeleteRequestDTO,
    BulkUpdateRequestDTO,
    ToggleLikeResponseDTO,
    VideoCreateDTO,
)
from service.errors import DomainValidationError, NotFoundError
from storage.clients.catalog_store import CatalogStore
from storage.schemas import NewVideo, VideoQuery, VideoRecord

logger = logging.getLogger(__name__)

RELATED_DEFAULT_LIMIT = 5
MOST_VIEWED_DEFAULT_LIMIT = 20
TRENDING_DEFAULT_DAYS = 7
TRENDING_LIMIT = 50

REQUIRED_FIELDS = ("title", "video_url", "thumbnail_url", "duration", "views")


def parse_count(raw: Optional[str], default: int) -> int:
    """Positive integer from a query value, else the default"""
    try:
        value = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        return default
    return value if value > 0 else default


async def get_video(store: CatalogStore, video_id: int) -> VideoRecord:
    video = await store.get_video(video_id)
    if video is None:
        raise NotFoundError(f"Video {video_id} not found")
    return video


async def list_related(store: CatalogStore, *, limit: int, category: Optional[str] = None) -> List[VideoRecord]:
    """Up to `limit` videos, optionally restricted to one category"""
    return await store.list_videos(VideoQuery(category=category or None, limit=limit))


async def list_most_viewed(store: CatalogStore, *, limit: int) -> List[VideoRecord]:
    return await store.list_videos(VideoQuery(order_by="views", descending=True, limit=limit))


async def list_trending(store: CatalogStore, *, days: int, now: Optional[datetime] = None) -> List[VideoRecord]:
    """Most viewed videos created in the last `days` days"""
    try:
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    except OverflowError as e:
        raise DomainValidationError(f"days out of range: {days}") from e
    return await store.list_videos(VideoQuery(
        created_after=since,
        order_by="views",
        descending=True,
        limit=TRENDING_LIMIT
    ))


async def create_video(store: CatalogStore, dto: VideoCreateDTO, *, trace_id: str = "") -> VideoRecord:
    """Insert a metadata record; duration and views default to 0"""
    data = dto.model_dump()
    data["duration"] = dto.duration or 0
    data["views"] = dto.views or 0

    video = await store.insert_video(NewVideo(**data))

    logger.info("Video metadata created", extra={"trace_id": trace_id, "video_id": video.id})
    return video


async def record_view(store: CatalogStore, video_id: int) -> int:
    views = await store.increment_views(video_id)
    if views is None:
        raise NotFoundError(f"Video {video_id} not found")
    return views


async def toggle_like(store: CatalogStore, video_id: int, user_id: Optional[str], *,
                      trace_id: str = "") -> ToggleLikeResponseDTO:
    """Flip like presence for (user, video) and return the new like count"""
    if not user_id:
        raise DomainValidationError("user_id required in body")

    if await store.has_like(user_id, video_id):
        await store.remove_like(user_id, video_id)
        liked = False
    else:
        await store.add_like(user_id, video_id)
        liked = True

    likes_count = await store.count_likes(video_id)

    logger.info("Like toggled", extra={
        "trace_id": trace_id,
        "video_id": video_id,
        "user_id": user_id
    })
    return ToggleLikeResponseDTO(liked=liked, likes_count=likes_count)


async def bulk_update(store: CatalogStore, dto: BulkUpdateRequestDTO, *, trace_id: str = "") -> int:
    """
    Apply the same field updates to every listed video.

    Raises:
        DomainValidationError: no ids or no fields to update
    """
    updates = dto.updates.model_dump(exclude_unset=True)
    if not dto.video_ids:
        raise DomainValidationError("video_ids must be a non-empty array")
    if not updates:
        raise DomainValidationError("updates must contain at least one field")
    nulled = [field for field in REQUIRED_FIELDS if field in updates and updates[field] is None]
    if nulled:
        raise DomainValidationError(f"updates cannot clear required fields: {', '.join(nulled)}")

    updated = await store.update_videos(dto.video_ids, updates)

    logger.info("Bulk update applied", extra={
        "trace_id": trace_id,
        "video_id": dto.video_ids,
        "total_count": updated
    })
    return updated


async def bulk_delete(store: CatalogStore, dto: BulkDeleteRequestDTO, *, trace_id: str = "") -> int:
    if not dto.video_ids:
        raise DomainValidationError("video_ids must be a non-empty array")

    deleted = await store.delete_videos(dto.video_ids)

    logger.info("Bulk delete applied", extra={
        "trace_id": trace_id,
        "video_id": dto.video_ids,
        "total_count": deleted
    })
    return deleted
