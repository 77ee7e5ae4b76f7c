"""Tests for app.client.cache — the client-side result cache."""

import json

import pytest

from app.client.cache import LocalStorage, ResultCache
from app.constants import STORAGE_KEY, AnalysisStatus, MediaKind
from app.models.analysis import AdCopy, AnalysisItem, ImageAnalysisResult, VideoAnalysisResult


def _item(item_id: str, timestamp: int, kind: MediaKind = MediaKind.IMAGE) -> AnalysisItem:
    return AnalysisItem(id=item_id, timestamp=timestamp, file_name=f"{item_id}.png", type=kind)


def _image_result() -> ImageAnalysisResult:
    return ImageAnalysisResult(
        description="A red sneaker",
        ad_copy=["Run Further"],
        visual_elements=["sneaker"],
        generated_ad_copy=AdCopy(headline="Run", description="Go further."),
    )


class TestLocalStorage:
    def test_set_get_remove(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "nested" / "store.json"))

        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"

        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_missing_file_is_empty(self, tmp_path):
        assert LocalStorage(str(tmp_path / "none.json")).get_item("a") is None


class TestOrdering:
    def test_list_is_newest_first(self, result_cache):
        for item_id, ts in [("a", 1000), ("b", 3000), ("c", 2000)]:
            result_cache.append(_item(item_id, ts))

        assert [item.id for item in result_cache.list_all()] == ["b", "c", "a"]

    def test_equal_timestamps_keep_last_appended_first(self, result_cache):
        result_cache.append(_item("first", 1000))
        result_cache.append(_item("second", 1000))

        assert [item.id for item in result_cache.list_all()] == ["second", "first"]

    def test_delete_removes_only_that_item(self, result_cache):
        for item_id, ts in [("a", 1000), ("b", 2000), ("c", 3000)]:
            result_cache.append(_item(item_id, ts))

        assert result_cache.delete("b") is True

        assert [item.id for item in result_cache.list_all()] == ["c", "a"]

    def test_delete_unknown_id(self, result_cache):
        result_cache.append(_item("a", 1000))

        assert result_cache.delete("zzz") is False
        assert len(result_cache.list_all()) == 1


class TestMutations:
    def test_duplicate_id_rejected(self, result_cache):
        result_cache.append(_item("a", 1000))

        with pytest.raises(ValueError, match="Duplicate"):
            result_cache.append(_item("a", 2000))

    def test_update_to_completed_persists_result(self, result_cache, tmp_path):
        result_cache.append(_item("a", 1000))
        result_cache.update("a", AnalysisStatus.PROCESSING)
        result_cache.update("a", AnalysisStatus.COMPLETED, result=_image_result())

        reloaded = ResultCache(LocalStorage(str(tmp_path / "local-storage.json"))).get("a")

        assert reloaded.status == AnalysisStatus.COMPLETED
        assert isinstance(reloaded.result, ImageAnalysisResult)
        assert reloaded.result.generated_ad_copy.headline == "Run"

    def test_backward_transition_rejected(self, result_cache):
        result_cache.append(_item("a", 1000))
        result_cache.update("a", AnalysisStatus.ERROR, error="upload failed")

        with pytest.raises(ValueError):
            result_cache.update("a", AnalysisStatus.PROCESSING)

        assert result_cache.get("a").status == AnalysisStatus.ERROR

    def test_result_kind_must_match_type(self, result_cache):
        result_cache.append(_item("a", 1000, kind=MediaKind.VIDEO))
        result_cache.update("a", AnalysisStatus.PROCESSING)

        with pytest.raises(ValueError):
            result_cache.update("a", AnalysisStatus.COMPLETED, result=_image_result())

    def test_update_unknown_id(self, result_cache):
        with pytest.raises(KeyError):
            result_cache.update("missing", AnalysisStatus.PROCESSING)

    def test_clear(self, result_cache):
        result_cache.append(_item("a", 1000))

        result_cache.clear()

        assert result_cache.list_all() == []


class TestStorageFormat:
    def test_items_stored_under_single_key_with_camel_case(self, result_cache):
        result_cache.append(_item("a", 1000))

        stored = json.loads(result_cache.storage.get_item(STORAGE_KEY))

        assert stored[0]["fileName"] == "a.png"
        assert stored[0]["status"] == "pending"

    def test_video_result_round_trips_by_type_tag(self, result_cache):
        result_cache.append(_item("v", 1000, kind=MediaKind.VIDEO))
        result_cache.update("v", AnalysisStatus.PROCESSING)
        result_cache.update(
            "v",
            AnalysisStatus.COMPLETED,
            result=VideoAnalysisResult(transcript="Hi", description="Wave", scenes=["One"]),
        )

        assert isinstance(result_cache.get("v").result, VideoAnalysisResult)

    def test_corrupt_data_is_treated_as_empty(self, result_cache):
        result_cache.storage.set_item(STORAGE_KEY, "{not json")

        assert result_cache.list_all() == []
