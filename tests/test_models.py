"""Tests for app.models and app.constants.enums."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from app.constants import AnalysisStatus, MediaKind, RemoteFileState
from app.models.analysis import (
    AdCopy,
    AnalysisItem,
    ImageAnalysisResult,
    RemoteFileHandle,
    VideoAnalysisResult,
)
from conftest import remote_file


class TestMediaKind:
    @pytest.mark.parametrize("mime_type, expected", [
        ("video/mp4", MediaKind.VIDEO),
        ("video/quicktime", MediaKind.VIDEO),
        ("image/png", MediaKind.IMAGE),
        (" IMAGE/JPEG ", MediaKind.IMAGE),
        ("application/pdf", None),
        ("videos/mp4", None),
        ("", None),
        (None, None),
    ])
    def test_prefix_rule(self, mime_type, expected):
        assert MediaKind.from_mime_type(mime_type) == expected


class TestAnalysisStatus:
    def test_forward_transitions(self):
        assert AnalysisStatus.PENDING.can_transition_to(AnalysisStatus.PROCESSING)
        assert AnalysisStatus.PENDING.can_transition_to(AnalysisStatus.ERROR)
        assert AnalysisStatus.PROCESSING.can_transition_to(AnalysisStatus.COMPLETED)

    def test_no_backward_or_terminal_transitions(self):
        assert not AnalysisStatus.PROCESSING.can_transition_to(AnalysisStatus.PENDING)
        assert not AnalysisStatus.COMPLETED.can_transition_to(AnalysisStatus.ERROR)
        assert not AnalysisStatus.ERROR.can_transition_to(AnalysisStatus.COMPLETED)
        assert not AnalysisStatus.PENDING.can_transition_to(AnalysisStatus.PENDING)


class TestRemoteFileHandle:
    def test_from_provider(self):
        handle = RemoteFileHandle.from_provider(remote_file("processing"))

        assert handle.state == RemoteFileState.PROCESSING
        assert handle.size_bytes == 2048
        assert not handle.is_active

    def test_unknown_state(self):
        assert RemoteFileState.parse("SOMETHING_NEW") == RemoteFileState.STATE_UNSPECIFIED
        assert RemoteFileState.parse(None) == RemoteFileState.STATE_UNSPECIFIED


class TestResults:
    def test_response_uses_wire_names(self):
        result = ImageAnalysisResult(
            description="d",
            ad_copy=["a"],
            visual_elements=["v"],
            generated_ad_copy=AdCopy(headline="h", description="x"),
        )

        assert result.to_response() == {
            "description": "d",
            "adCopy": ["a"],
            "visualElements": ["v"],
            "claudeAdCopy": {"headline": "h", "description": "x"},
        }

    def test_missing_ad_copy_is_omitted(self):
        result = VideoAnalysisResult(transcript="t", description="d", scenes=[])

        assert "claudeAdCopy" not in result.to_response()


class TestAnalysisItem:
    def test_defaults(self):
        item = AnalysisItem(file_name="spot.mp4", type=MediaKind.VIDEO)

        assert item.status == AnalysisStatus.PENDING
        assert item.id
        assert item.timestamp > 0

    def test_created_at_follows_millisecond_timestamp(self):
        item = AnalysisItem(file_name="spot.mp4", type=MediaKind.VIDEO, timestamp=1_700_000_000_500)

        assert item.created_at == datetime.fromtimestamp(1_700_000_000.5)

    def test_ids_are_unique(self):
        ids = {AnalysisItem(file_name="a.png", type=MediaKind.IMAGE).id for _ in range(50)}

        assert len(ids) == 50

    def test_completed_requires_result(self):
        with pytest.raises(ValidationError):
            AnalysisItem(file_name="a.png", type=MediaKind.IMAGE, status=AnalysisStatus.COMPLETED)

    def test_error_cannot_carry_result(self):
        with pytest.raises(ValidationError):
            AnalysisItem(
                file_name="a.png",
                type=MediaKind.IMAGE,
                status=AnalysisStatus.ERROR,
                error="boom",
                result=ImageAnalysisResult(description="d"),
            )

    def test_pending_cannot_carry_error(self):
        with pytest.raises(ValidationError):
            AnalysisItem(file_name="a.png", type=MediaKind.IMAGE, error="boom")

    def test_transition_returns_new_item(self):
        item = AnalysisItem(file_name="a.png", type=MediaKind.IMAGE)

        processing = item.transition(AnalysisStatus.PROCESSING)

        assert processing.id == item.id
        assert processing.status == AnalysisStatus.PROCESSING
        assert item.status == AnalysisStatus.PENDING

    def test_storage_round_trip_uses_type_tag(self):
        item = AnalysisItem(
            file_name="spot.mp4",
            type=MediaKind.VIDEO,
            status=AnalysisStatus.COMPLETED,
            result=VideoAnalysisResult(transcript="t", description="d", scenes=["s"]),
        )

        restored = AnalysisItem.model_validate(item.to_storage())

        assert isinstance(restored.result, VideoAnalysisResult)
        assert restored.file_name == "spot.mp4"
