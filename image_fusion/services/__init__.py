# image_fusion/services/__init__.py
from . import fusion_request, image_intake
from .fusion_worker import FusionInFlightError, begin_fusion, run_fusion

__all__ = [
    "FusionInFlightError",
    "begin_fusion",
    "fusion_request",
    "image_intake",
    "run_fusion",
]
