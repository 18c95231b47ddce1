"""Tests for Pydantic compatibility and no deprecation warnings"""
import warnings
from datetime import datetime, timezone

from service.dto import BulkUpdateRequestDTO, FeedPageDTO, VideoCreateDTO
from storage.schemas import VideoRecord


def dump_without_deprecations(model, **kwargs) -> dict:
    with warnings.catch_warnings(record=True) as warning_list:
        warnings.simplefilter("always")
        data = model.model_dump(**kwargs)

    deprecation_warnings = [w for w in warning_list if issubclass(w.category, DeprecationWarning)]
    assert len(deprecation_warnings) == 0, f"Deprecation warnings found: {deprecation_warnings}"
    return data


class TestPydanticCompatibility:
    """Models use the current Pydantic API"""

    def test_video_record_from_attributes(self):
        class Row:
            id = 4
            title = "Row"
            description = None
            category = "music"
            video_url = "http://x/v.mp4"
            thumbnail_url = "http://x/t.jpg"
            duration = 12
            views = 3
            created_at = datetime(2026, 2, 1, tzinfo=timezone.utc)
            meta_title = None
            meta_description = None
            meta_keywords = None

        data = dump_without_deprecations(VideoRecord.model_validate(Row()))

        assert data["id"] == 4
        assert data["category"] == "music"

    def test_feed_page_uses_camel_case_aliases(self):
        page = FeedPageDTO(page=1, limit=10, has_more=True, total_count=0, videos=[])

        data = dump_without_deprecations(page, by_alias=True)

        assert data["hasMore"] is True
        assert data["totalCount"] == 0
        assert "has_more" not in data

    def test_create_payload_exclude_unset(self):
        payload = VideoCreateDTO(title="A", video_url="http://x/v.mp4", thumbnail_url="http://x/t.jpg")

        data = dump_without_deprecations(payload, exclude_unset=True)

        assert set(data) == {"title", "video_url", "thumbnail_url"}

    def test_bulk_update_defaults(self):
        request = BulkUpdateRequestDTO()

        data = dump_without_deprecations(request.updates, exclude_unset=True)

        assert request.video_ids == []
        assert data == {}
