# image_fusion/middlewares/__init__.py
from .logging import struct_logging_middleware
from .session import session_middleware

__all__ = [
    "session_middleware",
    "struct_logging_middleware",
]
