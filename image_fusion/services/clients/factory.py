# image_fusion/services/clients/factory.py
from __future__ import annotations
from typing import Any

from image_fusion.data.settings import Settings

from .google_ai_client import GoogleGeminiClient
from .mock_ai_client import MockAIClient

_CLIENT_CLASSES: dict[str, type[Any]] = {
    "mock": MockAIClient,
    "google": GoogleGeminiClient,
}


def client_requires_api_key(client_name: str) -> bool:
    client_class = _CLIENT_CLASSES.get(client_name.lower())
    if not client_class:
        raise ValueError(f"Unknown client type specified in config: '{client_name}'")
    return client_class.requires_api_key


def get_ai_client(settings: Settings) -> Any:
    """
    Creates an AI client instance for the client named in settings.
    """
    client_name = settings.fusion.client.lower()
    client_class = _CLIENT_CLASSES.get(client_name)
    if not client_class:
        raise ValueError(f"Unknown client type specified in config: '{client_name}'")

    if client_class.requires_api_key:
        if not settings.google.api_key:
            raise RuntimeError("Missing API key for Gemini. Set env var GOOGLE__API_KEY.")
        return client_class(api_key=settings.google.api_key.get_secret_value())

    return client_class()
