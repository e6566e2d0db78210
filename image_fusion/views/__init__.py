# image_fusion/views/__init__.py
from .page import render_error_page, render_page
from .result import render_outcome

__all__ = [
    "render_error_page",
    "render_outcome",
    "render_page",
]
