import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.deps.common import get_catalog_store, get_feed_sampler, get_trace_id
from service import videos_service
from service.dto import (
    BulkDeleteRequestDTO,
    BulkDeleteResponseDTO,
    BulkUpdateRequestDTO,
    BulkUpdateResponseDTO,
    ErrorDTO,
    FeedPageDTO,
    ToggleLikeRequestDTO,
    ToggleLikeResponseDTO,
    VideoCreateDTO,
    VideoCreatedDTO,
    VideoDTO,
    VideoListDTO,
    ViewsDTO,
)
from service.feed_service import FeedSampler, parse_page
from storage.clients.catalog_store import CatalogStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["videos"])

ERRORS = {400: {"model": ErrorDTO}, 500: {"model": ErrorDTO}}


@router.get("/videos", response_model=FeedPageDTO, responses=ERRORS)
async def list_feed(
    page: Optional[str] = None,
    sampler: FeedSampler = Depends(get_feed_sampler),
    trace_id: str = Depends(get_trace_id)
) -> FeedPageDTO:
    """Feed page; random sample or id-desc offset page depending on FEED_MODE"""
    return await sampler.get_page(parse_page(page), trace_id=trace_id)


@router.get("/videos/related", response_model=VideoListDTO, responses=ERRORS)
async def list_related(
    limit: Optional[str] = None,
    category: Optional[str] = None,
    store: CatalogStore = Depends(get_catalog_store)
) -> VideoListDTO:
    videos = await videos_service.list_related(
        store,
        limit=videos_service.parse_count(limit, videos_service.RELATED_DEFAULT_LIMIT),
        category=category
    )
    return VideoListDTO(videos=videos)


@router.get("/videos/most-viewed", response_model=VideoListDTO, responses=ERRORS)
async def list_most_viewed(
    limit: Optional[str] = None,
    store: CatalogStore = Depends(get_catalog_store)
) -> VideoListDTO:
    videos = await videos_service.list_most_viewed(
        store,
        limit=videos_service.parse_count(limit, videos_service.MOST_VIEWED_DEFAULT_LIMIT)
    )
    return VideoListDTO(videos=videos)


@router.get("/videos/trending", response_model=VideoListDTO, responses=ERRORS)
async def list_trending(
    days: Optional[str] = None,
    store: CatalogStore = Depends(get_catalog_store)
) -> VideoListDTO:
    """Top 50 by views among videos created in the last `days` days (default 7)"""
    videos = await videos_service.list_trending(
        store,
        days=videos_service.parse_count(days, videos_service.TRENDING_DEFAULT_DAYS)
    )
    return VideoListDTO(videos=videos)


@router.patch("/videos/bulk-update", response_model=BulkUpdateResponseDTO, responses=ERRORS)
async def bulk_update(
    request: BulkUpdateRequestDTO,
    store: CatalogStore = Depends(get_catalog_store),
    trace_id: str = Depends(get_trace_id)
) -> BulkUpdateResponseDTO:
    updated = await videos_service.bulk_update(store, request, trace_id=trace_id)
    return BulkUpdateResponseDTO(success=True, updated=updated)


@router.post("/videos/bulk-delete", response_model=BulkDeleteResponseDTO, responses=ERRORS)
async def bulk_delete(
    request: BulkDeleteRequestDTO,
    store: CatalogStore = Depends(get_catalog_store),
    trace_id: str = Depends(get_trace_id)
) -> BulkDeleteResponseDTO:
    deleted = await videos_service.bulk_delete(store, request, trace_id=trace_id)
    return BulkDeleteResponseDTO(success=True, deleted=deleted)


@router.get("/videos/{video_id}", response_model=VideoDTO,
            responses={404: {"model": ErrorDTO}, 500: {"model": ErrorDTO}})
async def get_video(
    video_id: int,
    store: CatalogStore = Depends(get_catalog_store)
) -> VideoDTO:
    video = await videos_service.get_video(store, video_id)
    return VideoDTO(video=video)


@router.post("/videos", response_model=VideoCreatedDTO, status_code=201, responses=ERRORS)
async def create_video(
    request: VideoCreateDTO,
    store: CatalogStore = Depends(get_catalog_store),
    trace_id: str = Depends(get_trace_id)
) -> VideoCreatedDTO:
    video = await videos_service.create_video(store, request, trace_id=trace_id)
    return VideoCreatedDTO(video=video)


@router.post("/videos/{video_id}/view", response_model=ViewsDTO,
             responses={404: {"model": ErrorDTO}, 500: {"model": ErrorDTO}})
async def record_view(
    video_id: int,
    store: CatalogStore = Depends(get_catalog_store)
) -> ViewsDTO:
    views = await videos_service.record_view(store, video_id)
    return ViewsDTO(views=views)


@router.post("/videos/{video_id}/toggle-like", response_model=ToggleLikeResponseDTO, responses=ERRORS)
async def toggle_like(
    video_id: int,
    request: Optional[ToggleLikeRequestDTO] = None,
    store: CatalogStore = Depends(get_catalog_store),
    trace_id: str = Depends(get_trace_id)
) -> ToggleLikeResponseDTO:
    user_id = request.user_id if request is not None else None
    return await videos_service.toggle_like(store, video_id, user_id, trace_id=trace_id)
