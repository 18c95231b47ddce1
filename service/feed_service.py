"""Feed sampler for the /videos listing"""
import asyncio
import logging
import random
import time
from enum import Enum
from typing import List, Optional

from service.dto import FeedPageDTO
from storage.clients.catalog_store import CatalogStore
from storage.schemas import VideoQuery, VideoRecord

logger = logging.getLogger(__name__)


class FeedMode(str, Enum):
    RANDOM = "random"
    OFFSET = "offset"


def parse_page(raw: Optional[str]) -> int:
    """Page number from a query string value; anything unusable becomes 1"""
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


class FeedSampler:
    """
    Chooses which catalog rows a feed page returns.

    OFFSET mode pages deterministically through rows ordered by id desc.
    RANDOM mode draws `limit` independent offsets (with replacement) and
    fetches one row per offset concurrently; it never reports the end.
    """

    def __init__(self, store: CatalogStore, limit: int = 10,
                 mode: FeedMode = FeedMode.RANDOM, rng: Optional[random.Random] = None):
        if limit < 1:
            raise ValueError("limit must be positive")
        self.store = store
        self.limit = limit
        self.mode = FeedMode(mode)
        self.rng = rng or random.Random()

    async def get_page(self, page: int, *, trace_id: str = "") -> FeedPageDTO:
        """
        Build one feed page.

        Raises:
            UpstreamStoreError: count or row fetch failed
        """
        start_time = time.time()

        if self.mode is FeedMode.OFFSET:
            result = await self._offset_page(page)
        else:
            result = await self._random_page(page)

        logger.info("Feed page built", extra={
            "trace_id": trace_id,
            "mode": self.mode.value,
            "page": page,
            "limit": self.limit,
            "total_count": result.total_count,
            "latency_ms": int((time.time() - start_time) * 1000)
        })
        return result

    async def _offset_page(self, page: int) -> FeedPageDTO:
        start = (page - 1) * self.limit
        end = start + self.limit - 1

        total_count = await self.store.count_videos()
        videos = await self.store.list_videos(
            VideoQuery(order_by="id", descending=True, offset=start, limit=self.limit)
        )

        return FeedPageDTO(
            page=page,
            limit=self.limit,
            has_more=(end + 1) < total_count,
            total_count=total_count,
            videos=videos
        )

    async def _random_page(self, page: int) -> FeedPageDTO:
        total_count = await self.store.count_videos()
        if total_count == 0:
            return FeedPageDTO(page=page, limit=self.limit, has_more=True,
                               total_count=0, videos=[])

        offsets = self.draw_offsets(total_count)
        tasks = [asyncio.ensure_future(self._fetch_one(offset)) for offset in offsets]
        try:
            # gather keeps draw order; the first failure propagates
            batches = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        videos = [video for batch in batches for video in batch]

        return FeedPageDTO(
            page=page,
            limit=self.limit,
            has_more=True,
            total_count=total_count,
            videos=videos
        )

    def draw_offsets(self, total_count: int) -> List[int]:
        """`limit` uniform offsets in [0, total_count-1], duplicates allowed"""
        return [self.rng.randrange(total_count) for _ in range(self.limit)]

    async def _fetch_one(self, offset: int) -> List[VideoRecord]:
        return await self.store.list_videos(
            VideoQuery(order_by="id", descending=True, offset=offset, limit=1)
        )
