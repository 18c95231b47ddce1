from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from app.deps.common import get_catalog_store, get_settings
from app.settings import ApiSettings
from service.errors import NotFoundError
from service.seo_service import sitemap_xml, video_page_html
from storage.clients.catalog_store import CatalogStore

router = APIRouter(tags=["seo"])


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(
    store: CatalogStore = Depends(get_catalog_store),
    settings: ApiSettings = Depends(get_settings)
) -> Response:
    content = await sitemap_xml(store, settings.frontend_url)
    return Response(content=content, media_type="application/xml")


@router.get("/video/{video_id}", response_class=HTMLResponse)
async def video_page(
    video_id: str,
    store: CatalogStore = Depends(get_catalog_store),
    settings: ApiSettings = Depends(get_settings)
) -> Response:
    """Crawler-facing meta page that redirects browsers to the frontend"""
    if not (video_id.isascii() and video_id.isdigit()):
        return PlainTextResponse("Video not found", status_code=404)
    try:
        content = await video_page_html(store, int(video_id), settings.frontend_url)
    except NotFoundError:
        return PlainTextResponse("Video not found", status_code=404)
    return HTMLResponse(content=content)
