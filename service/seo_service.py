"""Sitemap and per-video meta page rendering"""
import html
import json
from typing import Iterable, Optional
from xml.sax.saxutils import escape as xml_escape

from service.videos_service import get_video
from storage.clients.catalog_store import CatalogStore
from storage.schemas import VideoQuery, VideoRecord

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

VIDEO_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title}</title>
  <meta name="description" content="{description}">
  <meta name="keywords" content="{keywords}">
  <link rel="canonical" href="{page_url}">
  <meta property="og:type" content="video.other">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta property="og:image" content="{thumbnail_url}">
  <meta property="og:video" content="{video_url}">
  <meta property="og:url" content="{page_url}">
  <meta name="twitter:card" content="player">
  <meta name="twitter:title" content="{title}">
  <meta name="twitter:description" content="{description}">
  <meta name="twitter:image" content="{thumbnail_url}">
</head>
<body>
  <h1>{title}</h1>
  <p>{description}</p>
  <noscript><a href="{page_url}">Watch video</a></noscript>
  <script>window.location.replace({page_url_js});</script>
</body>
</html>
"""


def escape_html(value: Optional[object]) -> str:
    """Escape &, <, >, " (and ') for text and attribute positions"""
    return html.escape("" if value is None else str(value), quote=True)


def frontend_video_url(frontend_url: str, video_id: int) -> str:
    return f"{frontend_url.rstrip('/')}/video/{video_id}"


def build_sitemap(videos: Iterable[VideoRecord], frontend_url: str) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NS}">',
    ]
    for video in videos:
        lines.append("  <url>")
        lines.append(f"    <loc>{xml_escape(frontend_video_url(frontend_url, video.id))}</loc>")
        if video.created_at is not None:
            lines.append(f"    <lastmod>{video.created_at.date().isoformat()}</lastmod>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def render_video_page(video: VideoRecord, frontend_url: str) -> str:
    """Meta tags for crawlers plus a redirect into the frontend"""
    page_url = frontend_video_url(frontend_url, video.id)
    return VIDEO_PAGE_TEMPLATE.format(
        title=escape_html(video.meta_title or video.title),
        description=escape_html(video.meta_description or video.description),
        keywords=escape_html(video.meta_keywords),
        thumbnail_url=escape_html(video.thumbnail_url),
        video_url=escape_html(video.video_url),
        page_url=escape_html(page_url),
        page_url_js=json.dumps(page_url).replace("</", "<\\/"),
    )


async def sitemap_xml(store: CatalogStore, frontend_url: str) -> str:
    videos = await store.list_videos(VideoQuery(order_by="id", descending=False))
    return build_sitemap(videos, frontend_url)


async def video_page_html(store: CatalogStore, video_id: int, frontend_url: str) -> str:
    """Raises NotFoundError for an unknown id"""
    video = await get_video(store, video_id)
    return render_video_page(video, frontend_url)
