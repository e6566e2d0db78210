# image_fusion/services/prompting/__init__.py
from .fusion_prompt import PROMPT_FUSION, build_fusion_prompt

__all__ = [
    "PROMPT_FUSION",
    "build_fusion_prompt",
]
