# image_fusion/utils/logging.py
import logging
import sys
from typing import Any

import structlog

from image_fusion.utils.serialization import orjson_dumps

# Base64 image bodies and data URLs must never be dumped whole into a log line.
MAX_LOGGED_VALUE_LENGTH = 512


def truncate_long_values(
    _logger: Any, _method_name: str, event_dict: structlog.typing.EventDict
) -> structlog.typing.EventDict:
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_LOGGED_VALUE_LENGTH:
            event_dict[key] = f"{value[:MAX_LOGGED_VALUE_LENGTH]}...<{len(value)} chars>"
    return event_dict


def setup_logger(level: int = logging.INFO) -> structlog.typing.FilteringBoundLogger:
    """
    Routes structlog and stdlib logging (aiohttp, google-genai) through one
    renderer: colored console output on a terminal, JSON lines otherwise.

    Request-scoped context bound with `structlog.contextvars` is merged into
    every event.
    """
    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        truncate_long_values,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if sys.stderr.isatty():
        renderer: structlog.typing.Processor = structlog.dev.ConsoleRenderer()
        exc_processors: list[structlog.typing.Processor] = []
    else:
        renderer = structlog.processors.JSONRenderer(serializer=orjson_dumps)
        exc_processors = [structlog.processors.dict_tracebacks]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *exc_processors,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Requests are already logged by the request middleware
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return structlog.get_logger("image_fusion.web")
