# image_fusion/web_handlers/error.py
from collections.abc import Awaitable, Callable

import structlog
from aiohttp import web

from image_fusion.data.texts import get_texts
from image_fusion.views import render_error_page

logger = structlog.get_logger(__name__)


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Handle all uncaught exceptions raised by request handlers."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as exception:
        logger.error("An unhandled exception occurred", exc_info=exception)
        return web.Response(
            status=500,
            text=render_error_page(get_texts().errors.unexpected),
            content_type="text/html",
        )
