"""Unit tests for sitemap and meta page rendering"""
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from service.seo_service import build_sitemap, escape_html, render_video_page, sitemap_xml, SITEMAP_NS
from storage.schemas import VideoRecord


def video(**overrides) -> VideoRecord:
    data = {
        "id": 3,
        "title": "Cats & Dogs",
        "description": "Best <b>friends</b>",
        "video_url": "https://cdn.test/v.mp4",
        "thumbnail_url": "https://cdn.test/t.jpg",
        "created_at": datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return VideoRecord(**data)


class TestEscaping:
    @pytest.mark.parametrize("raw,expected", [
        ("a & b", "a &amp; b"),
        ("<script>", "&lt;script&gt;"),
        ('say "hi"', "say &quot;hi&quot;"),
        (None, ""),
        (42, "42"),
    ])
    def test_escape_html(self, raw, expected):
        assert escape_html(raw) == expected


class TestVideoPage:

    def test_fields_are_escaped(self):
        html = render_video_page(video(title='"><script>alert(1)</script>'), "https://front.test")

        assert "<script>alert(1)</script>" not in html
        assert "&quot;&gt;&lt;script&gt;alert(1)&lt;/script&gt;" in html

    def test_meta_fields_default_to_title_and_description(self):
        html = render_video_page(video(), "https://front.test")

        assert "<title>Cats &amp; Dogs</title>" in html
        assert 'name="description" content="Best &lt;b&gt;friends&lt;/b&gt;"' in html
        assert 'name="keywords" content=""' in html

    def test_meta_overrides_win(self):
        html = render_video_page(
            video(meta_title="SEO title", meta_description="SEO desc", meta_keywords="cats,dogs"),
            "https://front.test"
        )

        assert "<title>SEO title</title>" in html
        assert 'content="SEO desc"' in html
        assert 'content="cats,dogs"' in html

    def test_redirects_to_frontend(self):
        html = render_video_page(video(), "https://front.test/")

        assert 'window.location.replace("https://front.test/video/3")' in html
        assert 'property="og:image" content="https://cdn.test/t.jpg"' in html
        assert 'property="og:video" content="https://cdn.test/v.mp4"' in html


class TestSitemap:

    def test_lists_every_video(self):
        xml = build_sitemap([video(id=1), video(id=2, created_at=None)], "https://front.test")

        root = ET.fromstring(xml.encode())
        ns = {"sm": SITEMAP_NS}
        locs = [el.text for el in root.findall("sm:url/sm:loc", ns)]
        assert locs == ["https://front.test/video/1", "https://front.test/video/2"]
        assert [el.text for el in root.findall("sm:url/sm:lastmod", ns)] == ["2026-03-01"]

    def test_empty_catalog(self):
        root = ET.fromstring(build_sitemap([], "https://front.test").encode())
        assert list(root) == []

    async def test_sitemap_orders_by_id(self, stub_store):
        xml = await sitemap_xml(stub_store, "https://front.test")

        positions = [xml.index(f"/video/{i}<") for i in range(1, 6)]
        assert positions == sorted(positions)
