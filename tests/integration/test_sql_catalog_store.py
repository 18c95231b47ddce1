"""Integration tests for the SQLAlchemy catalog store on a temporary SQLite database"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from core.db import Base, DatabaseSettings, create_engine_from_settings, create_session_factory
from service.errors import UpstreamStoreError
from service.feed_service import FeedMode, FeedSampler
from storage.clients.catalog_store import SqlCatalogStore
from storage.schemas import NewVideo, VideoQuery
from tests.factories import make_video


@pytest.fixture
async def engine(tmp_path):
    settings = DatabaseSettings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def sql_store(engine):
    store = SqlCatalogStore(create_session_factory(engine))
    for n in range(1, 6):
        await store.insert_video(NewVideo(**make_video(n)))
    return store


class TestSqlCatalogStore:

    async def test_insert_assigns_id_and_defaults(self, engine):
        store = SqlCatalogStore(create_session_factory(engine))

        video = await store.insert_video(NewVideo(
            title="A", video_url="http://x/v.mp4", thumbnail_url="http://x/t.jpg"
        ))

        assert video.id == 1
        assert video.duration == 0
        assert video.views == 0
        assert video.created_at is not None
        assert await store.get_video(1) == video

    async def test_get_missing(self, sql_store):
        assert await sql_store.get_video(999) is None

    async def test_count_and_range(self, sql_store):
        assert await sql_store.count_videos() == 5

        page = await sql_store.list_videos(VideoQuery(order_by="id", descending=True, offset=1, limit=2))

        assert [v.id for v in page] == [4, 3]

    async def test_category_filter_and_view_order(self, sql_store):
        viral = await sql_store.list_videos(VideoQuery(category="viral", order_by="views"))
        assert [v.id for v in viral] == [1, 3, 5]

    async def test_created_after_filter(self, sql_store):
        recent = await sql_store.list_videos(
            VideoQuery(created_after=datetime.now(timezone.utc) - timedelta(days=7))
        )
        future = await sql_store.list_videos(
            VideoQuery(created_after=datetime.now(timezone.utc) + timedelta(days=7))
        )

        assert len(recent) == 5
        assert future == []

    async def test_increment_views(self, sql_store):
        before = (await sql_store.get_video(5)).views

        assert await sql_store.increment_views(5) == before + 1
        assert await sql_store.increment_views(5) == before + 2
        assert await sql_store.increment_views(999) is None

    async def test_like_rows(self, sql_store):
        assert await sql_store.has_like("u1", 2) is False

        await sql_store.add_like("u1", 2)
        await sql_store.add_like("u2", 2)

        assert await sql_store.has_like("u1", 2) is True
        assert await sql_store.count_likes(2) == 2

        await sql_store.remove_like("u1", 2)

        assert await sql_store.has_like("u1", 2) is False
        assert await sql_store.count_likes(2) == 1

    async def test_duplicate_like_is_store_error(self, sql_store):
        await sql_store.add_like("u1", 2)

        with pytest.raises(UpstreamStoreError):
            await sql_store.add_like("u1", 2)

    async def test_bulk_update_and_delete(self, sql_store):
        await sql_store.add_like("u1", 1)

        assert await sql_store.update_videos([1, 2, 42], {"category": "news", "views": 100}) == 2
        assert (await sql_store.get_video(2)).category == "news"
        assert (await sql_store.get_video(3)).category == "viral"

        assert await sql_store.delete_videos([1, 3]) == 2
        assert await sql_store.count_videos() == 3
        assert await sql_store.count_likes(1) == 0

    async def test_update_rejects_unknown_fields(self, sql_store):
        with pytest.raises(ValueError):
            await sql_store.update_videos([1], {"id": 7})

    async def test_query_error_becomes_store_error(self, engine, sql_store):
        async with engine.begin() as conn:
            await conn.execute(text("DROP TABLE liked_videos"))

        with pytest.raises(UpstreamStoreError, match="liked_videos"):
            await sql_store.count_likes(1)

    async def test_random_feed_over_concurrent_sessions(self, sql_store):
        sampler = FeedSampler(sql_store, limit=8, mode=FeedMode.RANDOM)

        page = await sampler.get_page(1)

        assert len(page.videos) == 8
        assert {v.id for v in page.videos} <= {1, 2, 3, 4, 5}
        assert page.has_more is True

    async def test_offset_feed(self, sql_store):
        sampler = FeedSampler(sql_store, limit=2, mode=FeedMode.OFFSET)

        page = await sampler.get_page(3)

        assert [v.id for v in page.videos] == [1]
        assert page.has_more is False
        assert page.total_count == 5
