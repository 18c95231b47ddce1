"""Catalog store: persistence of video metadata and like rows"""
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.models import LikedVideo, VideoMetadata
from service.errors import UpstreamStoreError
from storage.schemas import NewVideo, VideoQuery, VideoRecord

logger = logging.getLogger(__name__)

ORDERABLE_COLUMNS = {
    "id": VideoMetadata.id,
    "views": VideoMetadata.views,
    "created_at": VideoMetadata.created_at,
}

UPDATABLE_FIELDS = frozenset({
    "title", "description", "category", "video_url", "thumbnail_url",
    "duration", "views", "meta_title", "meta_description", "meta_keywords",
})


class CatalogStore(ABC):
    """Abstract catalog store; every method is one round-trip to the backend"""

    @abstractmethod
    async def count_videos(self) -> int:
        """Exact number of catalog rows"""

    @abstractmethod
    async def list_videos(self, query: VideoQuery) -> List[VideoRecord]:
        """Rows matching the query's filter, order and range"""

    @abstractmethod
    async def get_video(self, video_id: int) -> Optional[VideoRecord]:
        """Single row by id, None when absent"""

    @abstractmethod
    async def insert_video(self, video: NewVideo) -> VideoRecord:
        """Insert a row and return it with store-assigned fields"""

    @abstractmethod
    async def increment_views(self, video_id: int) -> Optional[int]:
        """Atomically add one view; new count, or None when the id is unknown"""

    @abstractmethod
    async def update_videos(self, video_ids: Sequence[int], updates: Dict[str, Any]) -> int:
        """Apply the same field updates to every id; number of rows changed"""

    @abstractmethod
    async def delete_videos(self, video_ids: Sequence[int]) -> int:
        """Delete rows (and their likes); number of videos deleted"""

    @abstractmethod
    async def has_like(self, user_id: str, video_id: int) -> bool:
        pass

    @abstractmethod
    async def add_like(self, user_id: str, video_id: int) -> None:
        pass

    @abstractmethod
    async def remove_like(self, user_id: str, video_id: int) -> None:
        pass

    @abstractmethod
    async def count_likes(self, video_id: int) -> int:
        pass


class SqlCatalogStore(CatalogStore):
    """SQLAlchemy asyncio implementation; each call runs in its own session"""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            message = str(getattr(e, "orig", None) or e)
            logger.error("Catalog store call failed", extra={
                "error_type": type(e).__name__,
                "error_message": message
            })
            raise UpstreamStoreError(message) from e

    async def count_videos(self) -> int:
        async with self._session() as session:
            result = await session.execute(select(func.count()).select_from(VideoMetadata))
            return result.scalar_one()

    async def list_videos(self, query: VideoQuery) -> List[VideoRecord]:
        if query.order_by not in ORDERABLE_COLUMNS:
            raise ValueError(f"Cannot order by {query.order_by!r}")

        stmt = select(VideoMetadata)
        if query.category:
            stmt = stmt.where(VideoMetadata.category == query.category)
        if query.created_after is not None:
            stmt = stmt.where(VideoMetadata.created_at > query.created_after)

        column = ORDERABLE_COLUMNS[query.order_by]
        stmt = stmt.order_by(column.desc() if query.descending else column.asc())
        if query.order_by != "id":
            # stable pages for ties
            stmt = stmt.order_by(VideoMetadata.id.desc())

        if query.offset:
            stmt = stmt.offset(query.offset)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [VideoRecord.model_validate(row) for row in rows]

    async def get_video(self, video_id: int) -> Optional[VideoRecord]:
        async with self._session() as session:
            row = await session.get(VideoMetadata, video_id)
            return VideoRecord.model_validate(row) if row is not None else None

    async def insert_video(self, video: NewVideo) -> VideoRecord:
        async with self._session() as session:
            row = VideoMetadata(**video.model_dump())
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return VideoRecord.model_validate(row)

    async def increment_views(self, video_id: int) -> Optional[int]:
        stmt = (
            update(VideoMetadata)
            .where(VideoMetadata.id == video_id)
            .values(views=VideoMetadata.views + 1)
            .returning(VideoMetadata.views)
            .execution_options(synchronize_session=False)
        )
        async with self._session() as session:
            views = (await session.execute(stmt)).scalar_one_or_none()
            await session.commit()
            return views

    async def update_videos(self, video_ids: Sequence[int], updates: Dict[str, Any]) -> int:
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        stmt = (
            update(VideoMetadata)
            .where(VideoMetadata.id.in_(list(video_ids)))
            .values(**updates)
            .execution_options(synchronize_session=False)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount

    async def delete_videos(self, video_ids: Sequence[int]) -> int:
        ids = list(video_ids)
        async with self._session() as session:
            await session.execute(
                delete(LikedVideo)
                .where(LikedVideo.video_id.in_(ids))
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(
                delete(VideoMetadata)
                .where(VideoMetadata.id.in_(ids))
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount

    async def has_like(self, user_id: str, video_id: int) -> bool:
        stmt = (
            select(LikedVideo.id)
            .where(LikedVideo.user_id == user_id, LikedVideo.video_id == video_id)
            .limit(1)
        )
        async with self._session() as session:
            return (await session.execute(stmt)).scalar_one_or_none() is not None

    async def add_like(self, user_id: str, video_id: int) -> None:
        async with self._session() as session:
            session.add(LikedVideo(user_id=user_id, video_id=video_id))
            await session.commit()

    async def remove_like(self, user_id: str, video_id: int) -> None:
        stmt = delete(LikedVideo).where(
            LikedVideo.user_id == user_id, LikedVideo.video_id == video_id
        )
        async with self._session() as session:
            await session.execute(stmt)
            await session.commit()

    async def count_likes(self, video_id: int) -> int:
        stmt = select(func.count()).select_from(LikedVideo).where(LikedVideo.video_id == video_id)
        async with self._session() as session:
            return (await session.execute(stmt)).scalar_one()


class StubCatalogStore(CatalogStore):
    """In-memory implementation for testing without a database"""

    def __init__(self, videos: Optional[List[Dict[str, Any]]] = None):
        self._rows: Dict[int, VideoRecord] = {}
        self._likes: set = set()
        self._next_id = 1
        for data in videos or []:
            self._insert(NewVideo(**data))

    def _insert(self, video: NewVideo) -> VideoRecord:
        record = VideoRecord(
            id=self._next_id,
            created_at=datetime.now(timezone.utc),
            **video.model_dump()
        )
        self._rows[record.id] = record
        self._next_id += 1
        return record

    async def count_videos(self) -> int:
        return len(self._rows)

    async def list_videos(self, query: VideoQuery) -> List[VideoRecord]:
        rows = list(self._rows.values())
        if query.category:
            rows = [r for r in rows if r.category == query.category]
        if query.created_after is not None:
            rows = [r for r in rows if r.created_at and r.created_at > query.created_after]
        rows.sort(key=lambda r: r.id, reverse=True)
        if query.order_by != "id":
            rows.sort(key=lambda r: getattr(r, query.order_by), reverse=query.descending)
        elif not query.descending:
            rows.reverse()
        end = query.offset + query.limit if query.limit is not None else None
        return [r.model_copy() for r in rows[query.offset:end]]

    async def get_video(self, video_id: int) -> Optional[VideoRecord]:
        row = self._rows.get(video_id)
        return row.model_copy() if row else None

    async def insert_video(self, video: NewVideo) -> VideoRecord:
        return self._insert(video).model_copy()

    async def increment_views(self, video_id: int) -> Optional[int]:
        row = self._rows.get(video_id)
        if row is None:
            return None
        row.views += 1
        return row.views

    async def update_videos(self, video_ids: Sequence[int], updates: Dict[str, Any]) -> int:
        updated = 0
        for video_id in set(video_ids):
            row = self._rows.get(video_id)
            if row is not None:
                self._rows[video_id] = row.model_copy(update=updates)
                updated += 1
        return updated

    async def delete_videos(self, video_ids: Sequence[int]) -> int:
        deleted = 0
        for video_id in set(video_ids):
            if self._rows.pop(video_id, None) is not None:
                deleted += 1
            self._likes = {like for like in self._likes if like[1] != video_id}
        return deleted

    async def has_like(self, user_id: str, video_id: int) -> bool:
        return (user_id, video_id) in self._likes

    async def add_like(self, user_id: str, video_id: int) -> None:
        self._likes.add((user_id, video_id))

    async def remove_like(self, user_id: str, video_id: int) -> None:
        self._likes.discard((user_id, video_id))

    async def count_likes(self, video_id: int) -> int:
        return sum(1 for like in self._likes if like[1] == video_id)
