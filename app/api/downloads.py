from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.deps.common import get_asset_streamer, get_trace_id
from service.download_service import AssetStreamer
from service.dto import ErrorDTO

router = APIRouter(tags=["downloads"])


@router.get(
    "/download/{video_id}",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"application/octet-stream": {}}},
        404: {"model": ErrorDTO},
        500: {"model": ErrorDTO},
    }
)
async def download_video(
    video_id: int,
    streamer: AssetStreamer = Depends(get_asset_streamer),
    trace_id: str = Depends(get_trace_id)
) -> StreamingResponse:
    """
    Relay the video file as an attachment.

    Errors before the upstream answered become 404/500 JSON; once the body has
    started, an upstream failure can only cut the transfer short.
    """
    download = await streamer.open(video_id, trace_id=trace_id)
    # closes the upstream even when the body is never iterated
    return StreamingResponse(download.iter_body(), headers=download.headers,
                             background=BackgroundTask(download.upstream.aclose))
