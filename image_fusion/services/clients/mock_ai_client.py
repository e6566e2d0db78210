# image_fusion/services/clients/mock_ai_client.py
from __future__ import annotations
import asyncio
import io
from typing import Any

import structlog
from PIL import Image, ImageOps
from google.genai import types

logger = structlog.get_logger(__name__)

_MOCK_HEIGHT = 512
_MOCK_DELAY_SECONDS = 1.0
_FALLBACK_COLOR = "darkblue"


def _load_tile(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img = ImageOps.exif_transpose(img).convert("RGB")
    except Exception:
        logger.warning("MOCK Models: Could not decode input image, using a placeholder tile.")
        return Image.new("RGB", (_MOCK_HEIGHT, _MOCK_HEIGHT), color=_FALLBACK_COLOR)
    width = max(1, round(img.width * _MOCK_HEIGHT / img.height))
    return img.resize((width, _MOCK_HEIGHT))


def compose_side_by_side(images: list[bytes]) -> bytes:
    """Pastes the given images next to each other on one PNG canvas."""
    tiles = [_load_tile(data) for data in images] or [
        Image.new("RGB", (_MOCK_HEIGHT, _MOCK_HEIGHT), color=_FALLBACK_COLOR)
    ]
    canvas = Image.new("RGB", (sum(t.width for t in tiles), _MOCK_HEIGHT), color="gray")
    x = 0
    for tile in tiles:
        canvas.paste(tile, (x, 0))
        x += tile.width
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()


class _MockModelsNamespace:
    @staticmethod
    async def generate_content(
        *,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig | None = None,
    ) -> types.GenerateContentResponse:
        logger.info("MOCK Models: Simulating image fusion...", model=model)
        await asyncio.sleep(_MOCK_DELAY_SECONDS)

        images = [
            part.inline_data.data
            for content in contents
            for part in content.parts or []
            if part.inline_data is not None and part.inline_data.data
        ]
        image_bytes = await asyncio.to_thread(compose_side_by_side, images)

        return types.GenerateContentResponse(
            candidates=[
                types.Candidate(
                    content=types.Content(
                        role="model",
                        parts=[types.Part.from_bytes(data=image_bytes, mime_type="image/png")],
                    )
                )
            ]
        )


class MockAIClient:
    """Local stand-in for the Gemini client; needs no credential."""
    requires_api_key = False

    def __init__(self, **_kwargs: Any) -> None:
        self.models = _MockModelsNamespace()
