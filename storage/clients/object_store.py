"""Object store client for uploaded video and thumbnail files"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

from service.errors import UpstreamStoreError

logger = logging.getLogger(__name__)


class ObjectStoreSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    storage_url: str
    storage_key: str
    video_bucket: str = "videos"
    thumbnail_bucket: str = "thumbnails"
    download_timeout: float = 30.0


class ObjectStoreClient:
    """Hosted storage REST API: uploads, public URLs and streaming downloads"""

    def __init__(self, settings: ObjectStoreSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.base_url = settings.storage_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=settings.download_timeout,
            follow_redirects=True,
            transport=transport
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def public_url(self, bucket: str, file_name: str) -> str:
        """Public URL of an object in a public bucket"""
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(file_name)}"

    async def upload(self, bucket: str, file_name: str, data: bytes, content_type: Optional[str]) -> str:
        """Upload (overwriting) an object and return its public URL"""
        url = f"{self.base_url}/storage/v1/object/{bucket}/{quote(file_name)}"
        headers = {
            "apikey": self.settings.storage_key,
            "authorization": f"Bearer {self.settings.storage_key}",
            "content-type": content_type or "application/octet-stream",
            "x-upsert": "true",
        }

        try:
            response = await self.client.post(url, content=data, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Upload request error: {e}", extra={"bucket": bucket, "file_name": file_name})
            raise UpstreamStoreError(str(e) or type(e).__name__) from e

        if response.is_error:
            message = self._error_message(response)
            logger.error(f"Upload rejected: HTTP {response.status_code}", extra={
                "bucket": bucket,
                "file_name": file_name,
                "status_code": response.status_code,
                "error_message": message
            })
            raise UpstreamStoreError(message)

        return self.public_url(bucket, file_name)

    async def open_download(self, url: str) -> httpx.Response:
        """
        Start a streaming GET against an object URL.

        Only the status line and headers have been read when this returns; the
        caller owns the response and must `aclose()` it.

        Raises:
            UpstreamStoreError: connection failure or non-2xx status
        """
        try:
            request = self.client.build_request("GET", url)
            response = await self.client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamStoreError(str(e) or type(e).__name__) from e

        if response.is_error:
            await response.aclose()
            raise UpstreamStoreError(f"Upstream responded with HTTP {response.status_code}")

        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error", "msg"):
                if body.get(key):
                    return str(body[key])
        return response.text or f"HTTP {response.status_code}"
