"""Asset streamer: relays a stored video to the client as a forced download"""
import logging
from typing import AsyncIterator, Dict
from urllib.parse import quote, unquote, urlparse

import httpx

from service.errors import StreamingFailure, UpstreamStoreError
from service.videos_service import get_video
from storage.clients.catalog_store import CatalogStore
from storage.clients.object_store import ObjectStoreClient
from storage.schemas import VideoRecord

logger = logging.getLogger(__name__)


def download_file_name(video: VideoRecord) -> str:
    """Trailing path segment of the video URL, or a name derived from the id"""
    segment = unquote(urlparse(video.video_url).path.rstrip("/").rsplit("/", 1)[-1])
    # header value must stay a quoted-string
    segment = segment.replace('"', "").replace("\\", "").replace("\r", "").replace("\n", "")
    return segment or f"video_{video.id}.mp4"


class VideoDownload:
    """An opened upstream transfer whose headers are already fixed"""

    def __init__(self, video: VideoRecord, file_name: str, upstream: httpx.Response, trace_id: str = ""):
        self.video = video
        self.file_name = file_name
        self.upstream = upstream
        self.trace_id = trace_id

    @property
    def headers(self) -> Dict[str, str]:
        try:
            self.file_name.encode("latin-1")
            disposition = f'attachment; filename="{self.file_name}"'
        except UnicodeEncodeError:
            disposition = f"attachment; filename*=UTF-8''{quote(self.file_name)}"

        headers = {
            "Content-Disposition": disposition,
            "Content-Type": "application/octet-stream",
        }
        # decoded bytes no longer match an encoded upstream length
        length = self.upstream.headers.get("content-length")
        if length and "content-encoding" not in self.upstream.headers:
            headers["Content-Length"] = length
        return headers

    async def iter_body(self) -> AsyncIterator[bytes]:
        """
        Upstream chunks as they arrive; the upstream response is closed on
        completion, failure or consumer cancellation.

        Raises:
            StreamingFailure: upstream broke mid-body; the client response is truncated
        """
        sent = 0
        try:
            async for chunk in self.upstream.aiter_bytes():
                sent += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            logger.error("Download stream interrupted", extra={
                "trace_id": self.trace_id,
                "video_id": self.video.id,
                "error_type": type(e).__name__,
                "error_message": f"{e} after {sent} bytes"
            })
            raise StreamingFailure(str(e) or type(e).__name__) from e
        finally:
            await self.upstream.aclose()

        logger.info("Download completed", extra={
            "trace_id": self.trace_id,
            "video_id": self.video.id,
            "file_name": self.file_name
        })


class AssetStreamer:
    def __init__(self, store: CatalogStore, objects: ObjectStoreClient):
        self.store = store
        self.objects = objects

    async def open(self, video_id: int, *, trace_id: str = "") -> VideoDownload:
        """
        Resolve the record and start the upstream fetch.

        Raises:
            NotFoundError: no such video
            UpstreamStoreError: upstream unreachable before any byte was sent
        """
        video = await get_video(self.store, video_id)
        file_name = download_file_name(video)

        try:
            upstream = await self.objects.open_download(video.video_url)
        except UpstreamStoreError as e:
            raise UpstreamStoreError(f"Failed to download video: {e.message}") from e

        logger.info("Download started", extra={
            "trace_id": trace_id,
            "video_id": video.id,
            "file_name": file_name
        })
        return VideoDownload(video, file_name, upstream, trace_id)
