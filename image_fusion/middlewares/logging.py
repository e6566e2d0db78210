# image_fusion/middlewares/logging.py
import secrets
import time
from collections.abc import Awaitable, Callable

import structlog
from aiohttp import web

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def struct_logging_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """
    Logs every request with its status and duration.

    The request id, method and path are bound as context variables, so every
    log line emitted while handling the request (and by fusion jobs it spawns)
    carries them too.
    """
    logger: structlog.typing.FilteringBoundLogger = request.app["logger"]
    with structlog.contextvars.bound_contextvars(
        request_id=secrets.token_hex(6),
        method=request.method,
        path=request.path,
    ):
        start_time = time.monotonic()
        status = 500
        try:
            response = await handler(request)
            status = response.status
            return response
        except web.HTTPException as e:
            status = e.status
            raise
        finally:
            logger.info(
                "Handled request",
                status=status,
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
