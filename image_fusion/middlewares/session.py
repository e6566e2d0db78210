# image_fusion/middlewares/session.py
from collections.abc import Awaitable, Callable

from aiohttp import web

from image_fusion.states.session import MemorySessionStorage

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def session_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """
    Attaches the caller's FusionSession to the request as `request["session"]`,
    issuing a new cookie when the browser has none (or an unknown one).
    """
    storage: MemorySessionStorage = request.app["session_storage"]
    cookie_name: str = request.app["settings"].web.session_cookie

    cookie_value = request.cookies.get(cookie_name)
    session_id, session = storage.get_or_create(cookie_value)
    request["session"] = session

    response = await handler(request)

    if session_id != cookie_value:
        response.set_cookie(cookie_name, session_id, httponly=True, samesite="Lax")
    return response
