# image_fusion/web_handlers/result_image.py
import mimetypes

import structlog
from aiohttp import web

from image_fusion.dto.image_payload import ImagePayload
from image_fusion.dto.outcome import Success
from image_fusion.states.session import FusionSession

logger = structlog.get_logger(__name__)


def result_filename(mime_type: str) -> str:
    extension = mimetypes.guess_extension(mime_type) or ".bin"
    return f"fusion{extension}"


async def serve_result_image(req: web.Request) -> web.Response:
    """
    Serve the image produced by the session's latest successful fusion.

    Args:
        req: The incoming web request.

    Returns:
        The response object containing the image bytes.

    Raises:
        web.HTTPNotFound: If the session has no successful result.
        web.HTTPInternalServerError: If the stored result is corrupted.
    """
    session: FusionSession = req["session"]
    outcome = session.outcome
    if not isinstance(outcome, Success):
        raise web.HTTPNotFound(reason="No generated image")

    try:
        payload = ImagePayload.from_data_url(outcome.image_data_url)
        image_bytes = payload.to_bytes()
    except ValueError as e:
        logger.exception("Could not decode stored result image")
        raise web.HTTPInternalServerError(reason="Result data corrupted") from e

    return web.Response(
        body=image_bytes,
        content_type=payload.mime_type or "application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{result_filename(payload.mime_type)}"'
        },
    )


routes = [
    web.get("/result", serve_result_image),
]
