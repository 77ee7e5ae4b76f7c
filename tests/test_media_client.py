"""Tests for app.services.gemini — the media-analysis client.

Tests cover:
- Activation polling: poll counts, backoff delays, timeout, FAILED state
- Video analysis through the Files API (upload, generate, delete)
- Inline image analysis
- Error wrapping

All tests use a fake google-genai client — no real API calls.
"""

import asyncio

import pytest

from app.constants import REQUEST_TIMEOUT_SECONDS, UPLOAD_POLL_MAX_WAIT_SECONDS
from app.services.gemini import MediaAnalysisClient
from app.utils.api_helpers import ActivationTimeoutError, MediaAnalysisError
from conftest import IMAGE_JSON, RecordingSleep, gemini_response, remote_file


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    def test_requires_api_key_without_client(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            MediaAnalysisClient(api_key=None)


# =============================================================================
# Activation polling
# =============================================================================


class TestWaitUntilActive:
    def test_active_handle_needs_no_polls(self, media_client, fake_genai, sleep):
        asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert fake_genai.aio.files.get.await_count == 0
        assert sleep.delays == []
        fake_genai.aio.models.generate_content.assert_awaited_once()

    def test_becomes_active_on_third_poll(self, media_client, fake_genai, sleep):
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.side_effect = [
            remote_file("PROCESSING"),
            remote_file("PROCESSING"),
            remote_file("ACTIVE"),
        ]

        result = asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert fake_genai.aio.files.get.await_count == 3
        assert sleep.delays == [5.0, 7.5, 11.25]
        assert result.description == "A person brews coffee in a sunny kitchen."

    def test_poll_delay_is_capped(self, fake_genai):
        sleep = RecordingSleep()
        client = MediaAnalysisClient(
            client=fake_genai,
            poll_interval=10.0,
            poll_backoff=2.0,
            poll_max_interval=15.0,
            sleep=sleep,
        )
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.side_effect = [remote_file("PROCESSING")] * 3 + [remote_file("ACTIVE")]

        asyncio.run(client.analyze_video("clip.mp4", "video/mp4"))

        assert sleep.delays == [10.0, 15.0, 15.0, 15.0]

    def test_timeout_issues_no_generation_request(self, fake_genai, sleep):
        client = MediaAnalysisClient(client=fake_genai, poll_max_attempts=4, sleep=sleep)
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.return_value = remote_file("PROCESSING")

        with pytest.raises(ActivationTimeoutError, match="after 4 attempts"):
            asyncio.run(client.analyze_video("clip.mp4", "video/mp4"))

        assert fake_genai.aio.files.get.await_count == 4
        fake_genai.aio.models.generate_content.assert_not_awaited()

    def test_total_wait_stays_within_request_timeout(self, media_client, fake_genai, sleep):
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.return_value = remote_file("PROCESSING")

        with pytest.raises(ActivationTimeoutError, match="150s"):
            asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert sum(sleep.delays) == UPLOAD_POLL_MAX_WAIT_SECONDS
        assert sum(sleep.delays) < REQUEST_TIMEOUT_SECONDS
        assert sleep.delays[-1] == 6.25
        assert fake_genai.aio.files.get.await_count == 12
        fake_genai.aio.models.generate_content.assert_not_awaited()

    def test_failed_state_aborts_immediately(self, media_client, fake_genai):
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.return_value = remote_file("FAILED")

        with pytest.raises(MediaAnalysisError) as exc_info:
            asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert not isinstance(exc_info.value, ActivationTimeoutError)
        assert fake_genai.aio.files.get.await_count == 1
        fake_genai.aio.models.generate_content.assert_not_awaited()

    def test_upload_without_name_is_an_error(self, media_client, fake_genai):
        handle = remote_file("PROCESSING")
        handle.name = None
        fake_genai.aio.files.upload.return_value = handle

        with pytest.raises(MediaAnalysisError, match="did not return a file name"):
            asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))


# =============================================================================
# Video analysis
# =============================================================================


class TestAnalyzeVideo:
    def test_parses_structured_answer(self, media_client):
        result = asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert result.transcript == "Tired of slow mornings? Try BrewMax."
        assert result.scenes == ["Kitchen at sunrise", "Close-up of the machine", "Logo end card"]
        assert result.generated_ad_copy is None

    def test_remote_file_deleted_after_analysis(self, media_client, fake_genai):
        asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        fake_genai.aio.files.delete.assert_awaited_once_with(name="files/abc123")

    def test_remote_file_deleted_after_timeout(self, fake_genai, sleep):
        client = MediaAnalysisClient(client=fake_genai, poll_max_attempts=1, sleep=sleep)
        fake_genai.aio.files.upload.return_value = remote_file("PROCESSING")
        fake_genai.aio.files.get.return_value = remote_file("PROCESSING")

        with pytest.raises(ActivationTimeoutError):
            asyncio.run(client.analyze_video("clip.mp4", "video/mp4"))

        fake_genai.aio.files.delete.assert_awaited_once()

    def test_delete_failure_is_not_fatal(self, media_client, fake_genai):
        fake_genai.aio.files.delete.side_effect = RuntimeError("gone")

        result = asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert result.description

    def test_upload_rejection_propagates(self, media_client, fake_genai):
        fake_genai.aio.files.upload.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(MediaAnalysisError, match="quota exceeded"):
            asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

    def test_generation_error_is_wrapped(self, media_client, fake_genai):
        fake_genai.aio.models.generate_content.side_effect = RuntimeError("model overloaded")

        with pytest.raises(MediaAnalysisError, match="Failed to analyze video: model overloaded"):
            asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

    def test_prose_answer_gets_placeholders(self, media_client, fake_genai):
        fake_genai.aio.models.generate_content.return_value = gemini_response(
            "The ad opens on a beach and ends with a logo."
        )

        result = asyncio.run(media_client.analyze_video("clip.mp4", "video/mp4"))

        assert result.transcript == "No transcript available"
        assert result.description == "The ad opens on a beach and ends with a logo."
        assert result.scenes == ["Main scene: The ad opens on a beach and ends with a logo."]

    def test_by_uri_skips_upload(self, media_client, fake_genai):
        asyncio.run(media_client.analyze_video_by_uri("https://example.test/files/x", "video/mp4"))

        fake_genai.aio.files.upload.assert_not_awaited()
        fake_genai.aio.models.generate_content.assert_awaited_once()


# =============================================================================
# Image analysis
# =============================================================================


class TestAnalyzeImage:
    def test_image_sent_inline(self, media_client, fake_genai, tmp_path):
        image = tmp_path / "shoe.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\nfake")
        fake_genai.aio.models.generate_content.return_value = gemini_response(f"```json\n{IMAGE_JSON}\n```")

        result = asyncio.run(media_client.analyze_image(str(image), "image/png"))

        fake_genai.aio.files.upload.assert_not_awaited()
        assert result.description == "A red sneaker on a white background."
        assert result.ad_copy == ["Run Further"]
        assert result.visual_elements == ["red sneaker", "white background"]

    def test_missing_image_file_is_an_error(self, media_client, tmp_path):
        with pytest.raises(MediaAnalysisError, match="Failed to analyze image"):
            asyncio.run(media_client.analyze_image(str(tmp_path / "missing.png"), "image/png"))
