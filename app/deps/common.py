"""Common dependencies for FastAPI dependency injection"""
import uuid
from datetime import datetime, timezone

from fastapi import Depends, Request

from app.settings import ApiSettings
from service.download_service import AssetStreamer
from service.feed_service import FeedSampler
from storage.clients.catalog_store import CatalogStore
from storage.clients.object_store import ObjectStoreClient


def get_trace_id() -> str:
    """
    Generate unique trace ID for request tracking.

    Returns:
        str: Unique trace ID
    """
    return f"api_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


def get_settings(request: Request) -> ApiSettings:
    return request.app.state.settings


def get_catalog_store(request: Request) -> CatalogStore:
    """Catalog store built once by the application lifespan"""
    return request.app.state.catalog_store


def get_object_store(request: Request) -> ObjectStoreClient:
    """Object store client built once by the application lifespan"""
    return request.app.state.object_store


def get_feed_sampler(
    store: CatalogStore = Depends(get_catalog_store),
    settings: ApiSettings = Depends(get_settings)
) -> FeedSampler:
    return FeedSampler(store, limit=settings.feed_page_size, mode=settings.feed_mode)


def get_asset_streamer(
    store: CatalogStore = Depends(get_catalog_store),
    objects: ObjectStoreClient = Depends(get_object_store)
) -> AssetStreamer:
    return AssetStreamer(store, objects)
