# image_fusion/web_handlers/__init__.py
from .error import error_middleware
from .fusion import routes as fusion_routes
from .result_image import routes as result_routes

__all__ = [
    "error_middleware",
    "fusion_routes",
    "result_routes",
]
