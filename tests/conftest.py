"""Shared pytest fixtures for the Ad Media Analyzer tests.

Provider SDKs are never called: the Gemini and OpenAI clients are replaced
by MagicMock objects whose async methods are AsyncMocks, and the FastAPI
dependencies are overridden with clients built on those fakes.

Fixtures included:
- Provider fakes: fake_genai, fake_openai, remote_file, copy_response
- Service clients: media_client, copy_client
- API: api_client (TestClient with dependency overrides)
- Cache: result_cache
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api import app
from app.client.cache import LocalStorage, ResultCache
from app.config import get_settings
from app.core.dependencies import get_copy_client, get_media_client
from app.services.copywriter import CopyGenerationClient
from app.services.gemini import MediaAnalysisClient

# =============================================================================
# Helper Functions
# =============================================================================


def remote_file(state: str = "ACTIVE", name: str = "files/abc123") -> SimpleNamespace:
    """A provider file object as returned by files.upload / files.get."""
    return SimpleNamespace(
        name=name,
        uri=f"https://generativelanguage.googleapis.com/v1beta/{name}",
        mime_type="video/mp4",
        state=state,
        size_bytes="2048",
    )


def gemini_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text)


def copy_response(headline: str = "Stop Scrolling", description: str = "Meet the ad that sells itself.") -> SimpleNamespace:
    """A chat completion whose message calls the ad_copy tool."""
    tool_call = SimpleNamespace(
        function=SimpleNamespace(
            name="ad_copy",
            arguments=json.dumps({"headline": headline, "description": description}),
        )
    )
    message = SimpleNamespace(content=None, tool_calls=[tool_call])
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


VIDEO_JSON = json.dumps({
    "transcript": "Tired of slow mornings? Try BrewMax.",
    "description": "A person brews coffee in a sunny kitchen.",
    "scenes": ["Kitchen at sunrise", "Close-up of the machine", "Logo end card"],
})

IMAGE_JSON = json.dumps({
    "description": "A red sneaker on a white background.",
    "adCopy": ["Run Further"],
    "visualElements": ["red sneaker", "white background"],
})


# =============================================================================
# Provider fakes
# =============================================================================


@pytest.fixture
def fake_genai():
    client = MagicMock()
    client.aio.files.upload = AsyncMock(return_value=remote_file("ACTIVE"))
    client.aio.files.get = AsyncMock(return_value=remote_file("ACTIVE"))
    client.aio.files.delete = AsyncMock(return_value=None)
    client.aio.models.generate_content = AsyncMock(return_value=gemini_response(VIDEO_JSON))
    return client


@pytest.fixture
def fake_openai():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=copy_response())
    return client


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def media_client(fake_genai, sleep):
    return MediaAnalysisClient(client=fake_genai, sleep=sleep)


@pytest.fixture
def copy_client(fake_openai):
    return CopyGenerationClient(client=fake_openai)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    directory = tmp_path / "media-tmp"
    monkeypatch.setenv("TEMP_DIR", str(directory))
    monkeypatch.setenv("ALLOWED_API_KEYS", "")
    get_settings.cache_clear()
    yield directory
    get_settings.cache_clear()


@pytest.fixture
def api_client(media_client, copy_client, temp_dir):
    app.dependency_overrides[get_media_client] = lambda: media_client
    app.dependency_overrides[get_copy_client] = lambda: copy_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# Cache
# =============================================================================


@pytest.fixture
def result_cache(tmp_path):
    return ResultCache(LocalStorage(str(tmp_path / "local-storage.json")))
