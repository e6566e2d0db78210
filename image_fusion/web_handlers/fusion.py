# image_fusion/web_handlers/fusion.py
from typing import TYPE_CHECKING, Any

import structlog
from aiohttp import hdrs, web

from image_fusion.data.constants import FusionAction, ImageSlot
from image_fusion.data.settings import Settings
from image_fusion.services import FusionInFlightError, begin_fusion, run_fusion
from image_fusion.services.image_intake import intake_image
from image_fusion.states.session import FusionSession
from image_fusion.utils.serialization import orjson_dumps
from image_fusion.views import render_page

if TYPE_CHECKING:
    import aiojobs

logger = structlog.get_logger(__name__)


def _redirect_home() -> web.Response:
    return web.Response(status=303, headers={hdrs.LOCATION: "/"})


async def index(req: web.Request) -> web.Response:
    session: FusionSession = req["session"]
    settings: Settings = req.app["settings"]
    return web.Response(
        text=render_page(session, refresh_seconds=settings.web.refresh_seconds),
        content_type="text/html",
    )


async def upload_image(req: web.Request) -> web.Response:
    """
    Stores the multipart `image` field into slot 1 or 2.

    Raises:
        web.HTTPNotFound: If the slot is not 1 or 2.
        web.HTTPBadRequest: If no file was sent.
    """
    try:
        slot = ImageSlot(req.match_info["slot"])
    except ValueError:
        raise web.HTTPNotFound(reason="Unknown slot") from None

    form = await req.post()
    field = form.get("image")
    if not isinstance(field, web.FileField):
        raise web.HTTPBadRequest(reason="No image file in upload")

    session: FusionSession = req["session"]
    await intake_image(session, slot, field.file, field.content_type)
    return _redirect_home()


def _apply_action(session: FusionSession, form: Any) -> None:
    if "action" not in form:
        return
    raw_action = form["action"]
    if not raw_action:
        session.action = None
        return
    try:
        session.action = FusionAction(raw_action)
    except ValueError:
        raise web.HTTPBadRequest(reason="Unknown action") from None


async def fuse(req: web.Request) -> web.Response:
    """
    Dispatches a fusion request for the caller's session.

    Precondition failures are recorded as the session's outcome; the actual
    model call runs as a background job while the page polls.

    Raises:
        web.HTTPConflict: If a request is already in flight.
        web.HTTPBadRequest: If the action is not one of the offered ones.
    """
    session: FusionSession = req["session"]
    settings: Settings = req.app["settings"]
    scheduler: aiojobs.Scheduler = req.app["scheduler"]

    if scheduler.closed:
        raise web.HTTPServiceUnavailable(reason="Closed queue")
    if session.is_loading:
        raise web.HTTPConflict(reason="A fusion request is already in progress")

    form = await req.post()
    _apply_action(session, form)

    try:
        inputs = begin_fusion(session, settings)
    except FusionInFlightError:
        raise web.HTTPConflict(reason="A fusion request is already in progress") from None

    if inputs is not None:
        await scheduler.spawn(
            run_fusion(session, inputs, settings, req.app["ai_client_factory"])
        )
        logger.info("Fusion request dispatched", action=inputs.action.value)

    return _redirect_home()


async def get_state(req: web.Request) -> web.Response:
    """JSON snapshot of the caller's session, without image bodies."""
    session: FusionSession = req["session"]
    payload = {
        "outcome": session.outcome.model_dump(),
        "slots": {slot.value: session.get_image(slot) is not None for slot in ImageSlot},
        "slot_errors": {slot.value: msg for slot, msg in session.slot_errors.items()},
        "action": session.action.value if session.action else None,
    }
    return web.json_response(payload, dumps=orjson_dumps)


routes = [
    web.get("/", index),
    web.post("/slots/{slot}", upload_image),
    web.post("/fuse", fuse),
    web.get("/api/state", get_state),
]
