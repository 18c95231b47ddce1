"""HTTP tests for /sitemap.xml and /video/{id}"""
import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from service.seo_service import SITEMAP_NS
from storage.clients.catalog_store import StubCatalogStore
from tests.factories import make_video


class TestSitemap:

    def test_lists_every_video(self, client):
        response = client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        root = ET.fromstring(response.content)
        locs = [loc.text for loc in root.iter(f"{{{SITEMAP_NS}}}loc")]
        assert locs == [f"https://front.test/video/{n}" for n in range(1, 6)]

    def test_empty_catalog(self, api_settings, empty_store, object_store):
        with TestClient(create_app(api_settings, empty_store, object_store)) as empty_client:
            root = ET.fromstring(empty_client.get("/sitemap.xml").content)

        assert list(root) == []


class TestVideoPage:

    def test_meta_page(self, client):
        response = client.get("/video/2")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert '<meta property="og:title" content="Video 2">' in response.text
        assert "https://front.test/video/2" in response.text

    def test_user_text_is_escaped(self, api_settings, object_store):
        store = StubCatalogStore([make_video(1, title='<script>alert("x")</script>', description="a & b")])
        with TestClient(create_app(api_settings, store, object_store)) as page_client:
            text = page_client.get("/video/1").text

        assert "<script>alert" not in text
        assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;" in text
        assert "a &amp; b" in text

    def test_unknown_video(self, client):
        response = client.get("/video/999")

        assert response.status_code == 404
        assert response.text == "Video not found"

    @pytest.mark.parametrize("raw_id", ["abc", "%C2%B2", "-1"])
    def test_non_numeric_id(self, client, raw_id):
        response = client.get(f"/video/{raw_id}")

        assert response.status_code == 404
        assert response.text == "Video not found"
