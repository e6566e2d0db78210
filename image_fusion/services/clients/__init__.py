# image_fusion/services/clients/__init__.py
from .factory import client_requires_api_key, get_ai_client
from .google_ai_client import GoogleGeminiClient
from .mock_ai_client import MockAIClient

__all__ = [
    "GoogleGeminiClient",
    "MockAIClient",
    "client_requires_api_key",
    "get_ai_client",
]
