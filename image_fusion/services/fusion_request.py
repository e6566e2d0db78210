# File: image_fusion/services/fusion_request.py
"""
Builds the single Gemini request that fuses two people into one photo and
turns the model's answer into a request outcome.

The request is one user turn whose parts are, in order: the first image, the
second image, then the text prompt. Only image output is requested.
"""
import base64
from typing import Any

from google.genai import types
from google.genai.types import Modality
from pydantic import BaseModel

from image_fusion.data.constants import FusionAction
from image_fusion.data.settings import Settings
from image_fusion.data.texts import get_texts
from image_fusion.dto.image_payload import ImagePayload
from image_fusion.dto.outcome import Failure, Success
from image_fusion.services.clients.factory import client_requires_api_key
from image_fusion.services.prompting import build_fusion_prompt
from image_fusion.states.session import FusionSession


def check_preconditions(session: FusionSession, settings: Settings) -> str | None:
    """
    Returns the failure message that blocks a dispatch, or None if the
    request may go out.
    """
    errors = get_texts().errors
    if not session.has_both_images or not session.action:
        return errors.missing_inputs
    if client_requires_api_key(settings.fusion.client) and not settings.google.api_key:
        return errors.missing_api_key
    return None


class FusionInputs(BaseModel):
    """The images and action a dispatched request is sent with."""
    first_image: ImagePayload
    second_image: ImagePayload
    action: FusionAction

    @classmethod
    def from_session(cls, session: FusionSession) -> "FusionInputs":
        return cls(
            first_image=session.first_image,
            second_image=session.second_image,
            action=session.action,
        )


def image_to_part(payload: ImagePayload) -> types.Part:
    return types.Part.from_bytes(data=payload.to_bytes(), mime_type=payload.mime_type)


def build_fusion_contents(
    first: ImagePayload,
    second: ImagePayload,
    action: FusionAction | str,
) -> list[types.Content]:
    return [
        types.Content(
            role="user",
            parts=[
                image_to_part(first),
                image_to_part(second),
                types.Part.from_text(text=build_fusion_prompt(action)),
            ],
        )
    ]


def build_generation_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(response_modalities=[Modality.IMAGE])


def find_first_inline_image(response: Any) -> Any | None:
    """
    Returns the inline data of the first image-bearing part of the first
    candidate. First match wins; any later parts or candidates are ignored.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and getattr(inline, "data", None):
            return inline
    return None


def inline_data_to_data_url(inline: Any) -> str:
    data = inline.data
    # The SDK decodes inline data to bytes; raw REST payloads keep it as base64 text.
    encoded = base64.b64encode(data).decode("ascii") if isinstance(data, bytes) else data
    return f"data:{inline.mime_type};base64,{encoded}"


def outcome_from_response(response: Any) -> Success | Failure:
    inline = find_first_inline_image(response)
    if inline is None:
        return Failure(message=get_texts().errors.no_image)
    return Success(image_data_url=inline_data_to_data_url(inline))
