"""Upload of video and thumbnail files to the object store"""
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from service.errors import DomainValidationError
from storage.clients.object_store import ObjectStoreClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetKind:
    """Naming rules for one kind of uploaded asset"""
    field: str
    prefix: str
    default_ext: str


VIDEO = AssetKind(field="video", prefix="video", default_ext=".mp4")
THUMBNAIL = AssetKind(field="thumbnail", prefix="thumb", default_ext=".jpg")


def build_file_name(kind: AssetKind, original_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """`<prefix>_<epoch ms><ext>`, keeping the client's extension when it has one"""
    ext = os.path.splitext(original_name or "")[1] or kind.default_ext
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{kind.prefix}_{now_ms}{ext}"


async def upload_asset(
    client: ObjectStoreClient,
    kind: AssetKind,
    *,
    bucket: str,
    original_name: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    trace_id: str = ""
) -> tuple[str, str]:
    """
    Store an uploaded file under a timestamped name.

    Returns:
        (file name, public URL)

    Raises:
        DomainValidationError: no file was sent
        UpstreamStoreError: the object store rejected the upload
    """
    if data is None:
        raise DomainValidationError(f"No {kind.field} file uploaded")

    file_name = build_file_name(kind, original_name)
    public_url = await client.upload(bucket, file_name, data, content_type)

    logger.info("Asset uploaded", extra={
        "trace_id": trace_id,
        "bucket": bucket,
        "file_name": file_name
    })
    return file_name, public_url
