"""Common test fixtures for all test modules"""
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from storage.clients.catalog_store import StubCatalogStore
from storage.clients.object_store import ObjectStoreClient, ObjectStoreSettings

from tests.factories import STORAGE_URL, make_settings, make_video


@pytest.fixture
def sample_videos():
    """Five catalog rows; ids 1..5 in insertion order"""
    return [make_video(n) for n in range(1, 6)]


@pytest.fixture
def stub_store(sample_videos):
    return StubCatalogStore(sample_videos)


@pytest.fixture
def empty_store():
    return StubCatalogStore()


@pytest.fixture
def storage_settings():
    return ObjectStoreSettings(storage_url=STORAGE_URL, storage_key="service-key")


@pytest.fixture
def storage_requests():
    """Requests seen by the mocked object store, in order"""
    return []


@pytest.fixture
def storage_handler():
    """Default upstream: uploads succeed, downloads return a small body"""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json={"Key": request.url.path})
        return httpx.Response(200, content=b"\x00\x01video-bytes\x02",
                              headers={"content-type": "video/mp4"})
    return handler


@pytest.fixture
def object_store(storage_settings, storage_handler, storage_requests):
    def recording_handler(request: httpx.Request):
        storage_requests.append(request)
        return storage_handler(request)

    return ObjectStoreClient(storage_settings, transport=httpx.MockTransport(recording_handler))


@pytest.fixture
def api_settings():
    return make_settings()


@pytest.fixture
def client(api_settings, stub_store, object_store):
    app = create_app(settings=api_settings, catalog_store=stub_store, object_store=object_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fixed_now():
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
