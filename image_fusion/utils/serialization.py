# image_fusion/utils/serialization.py
from typing import Any

import orjson


def orjson_dumps(obj: Any, *, default: Any = None) -> str:
    """json.dumps-compatible wrapper around orjson for structlog and responses."""
    return orjson.dumps(obj, default=default).decode()
