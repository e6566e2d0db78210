import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types
from PIL import Image

from image_fusion.app import setup_aiohttp_app
from image_fusion.data.settings import FusionConfig, GoogleConfig, Settings
from image_fusion.dto.image_payload import ImagePayload


def make_png(color: str = "red", size: tuple[int, int] = (8, 6)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def make_response(*candidate_parts: list[types.Part]) -> types.GenerateContentResponse:
    """Builds a response with one candidate per list of parts."""
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=parts))
            for parts in candidate_parts
        ]
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_png("red")


@pytest.fixture
def other_png_bytes() -> bytes:
    return make_png("blue", size=(10, 10))


@pytest.fixture
def result_png_bytes() -> bytes:
    return make_png("green", size=(12, 12))


@pytest.fixture
def first_payload(png_bytes) -> ImagePayload:
    return ImagePayload.from_bytes(png_bytes, "image/png")


@pytest.fixture
def second_payload(other_png_bytes) -> ImagePayload:
    return ImagePayload.from_bytes(other_png_bytes, "image/png")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google=GoogleConfig(api_key="test-key"),
        fusion=FusionConfig(client="google"),
    )


@pytest.fixture
def settings_without_key() -> Settings:
    return Settings(
        google=GoogleConfig(api_key=None),
        fusion=FusionConfig(client="google"),
    )


@pytest.fixture
def image_response(result_png_bytes) -> types.GenerateContentResponse:
    return make_response(
        [
            types.Part.from_text(text="Here you go"),
            types.Part.from_bytes(data=result_png_bytes, mime_type="image/png"),
        ]
    )


@pytest.fixture
def fake_ai_client(image_response):
    """Mock Gemini client answering with one generated image."""
    client = MagicMock()
    client.models.generate_content = AsyncMock(return_value=image_response)
    return client


@pytest.fixture
async def web_client(aiohttp_client, settings, fake_ai_client):
    app = await setup_aiohttp_app(settings, ai_client_factory=lambda _s: fake_ai_client)
    return await aiohttp_client(app)
