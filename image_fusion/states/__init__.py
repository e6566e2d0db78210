# image_fusion/states/__init__.py
from .session import FusionSession, MemorySessionStorage

__all__ = [
    "FusionSession",
    "MemorySessionStorage",
]
