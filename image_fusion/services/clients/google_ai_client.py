# image_fusion/services/clients/google_ai_client.py
from __future__ import annotations
from typing import Any

import structlog

# Google Gen AI SDK (Gemini API backend)
from google import genai
from google.genai import types
from google.genai.types import Modality

logger = structlog.get_logger(__name__)


def summarize_response(resp: Any) -> dict:
    """Safe, small logging payload; redacts inline image bytes."""
    if not resp:
        return {}
    out: dict[str, Any] = {"candidates": []}
    for c in getattr(resp, "candidates", None) or []:
        content = getattr(c, "content", None)
        out_parts = []
        for p in getattr(content, "parts", None) or []:
            inline = getattr(p, "inline_data", None)
            if inline is not None:
                data = getattr(inline, "data", None) or b""
                out_parts.append({
                    "inline_data": {
                        "mime_type": getattr(inline, "mime_type", None),
                        "data": f"<redacted {len(data)} bytes>",
                    }
                })
            elif getattr(p, "text", None):
                out_parts.append({"text": p.text})
            else:
                out_parts.append({"other": True})
        finish_reason = getattr(c, "finish_reason", None)
        out["candidates"].append({
            "finish_reason": str(finish_reason) if finish_reason else None,
            "parts": out_parts,
        })
    return out


class _ModelsNamespace:
    """
    Calls the Gemini image model through google-genai's async surface
    (client.aio.models.generate_content).
    """

    def __init__(self, api_key: str) -> None:
        try:
            self._client = genai.Client(api_key=api_key)
            logger.info("GenAI client initialized (Gemini API backend).")
        except Exception:
            logger.exception("Failed to initialize Google Gen AI client.")
            raise

    async def generate_content(
        self,
        *,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig | None = None,
    ) -> types.GenerateContentResponse:
        log = logger.bind(model=model)
        if config is None:
            config = types.GenerateContentConfig(response_modalities=[Modality.IMAGE])

        log.info("Calling Gemini for image generation.")
        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            log.error("Gemini API error during image generation", error=str(e))
            raise

        log.debug("Gemini responded.", payload=summarize_response(response))
        return response


class GoogleGeminiClient:
    """Gemini client focused on image generation."""
    requires_api_key = True

    def __init__(self, api_key: str, **_kwargs: Any) -> None:
        self.models = _ModelsNamespace(api_key)
