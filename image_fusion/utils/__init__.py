# image_fusion/utils/__init__.py
from . import logging, serialization

__all__ = [
    "logging",
    "serialization",
]
