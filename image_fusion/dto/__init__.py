# image_fusion/dto/__init__.py
from .image_payload import ImagePayload
from .outcome import Failure, Idle, Loading, RequestOutcome, Success

__all__ = [
    "Failure",
    "Idle",
    "ImagePayload",
    "Loading",
    "RequestOutcome",
    "Success",
]
