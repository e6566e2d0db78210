# image_fusion/services/image_intake.py
import asyncio
import io
from typing import BinaryIO

import structlog
from PIL import Image, UnidentifiedImageError

from image_fusion.data.constants import FALLBACK_MIME_TYPE, ImageSlot
from image_fusion.data.texts import get_texts
from image_fusion.dto.image_payload import ImagePayload
from image_fusion.states.session import FusionSession

logger = structlog.get_logger(__name__)


class ImageReadError(Exception):
    """The uploaded file could not be read into an image payload."""


def sniff_mime_type(data: bytes) -> str | None:
    """Guesses the MIME type of image data with Pillow, or None if unknown."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


async def read_image_payload(file: BinaryIO, content_type: str | None) -> ImagePayload:
    """
    Reads an uploaded file completely and encodes it as an ImagePayload.

    The declared content type wins; it is only sniffed from the bytes when the
    browser sent none. Non-image types are passed through as declared.

    Raises:
        ImageReadError: If the file cannot be read.
    """
    try:
        data = await asyncio.to_thread(file.read)
    except (OSError, ValueError) as e:
        raise ImageReadError(str(e)) from e

    mime_type = content_type
    if not mime_type or mime_type == FALLBACK_MIME_TYPE:
        mime_type = sniff_mime_type(data) or FALLBACK_MIME_TYPE

    return ImagePayload.from_bytes(data, mime_type)


async def intake_image(
    session: FusionSession,
    slot: ImageSlot,
    file: BinaryIO,
    content_type: str | None,
) -> bool:
    """
    Stores an upload into one slot of the session.

    On failure the slot keeps its previous payload and gets an error message;
    the other slot and the request outcome are not touched.
    """
    log = logger.bind(slot=slot.value)
    try:
        payload = await read_image_payload(file, content_type)
    except ImageReadError as e:
        log.warning("Failed to read uploaded image", error=str(e))
        session.set_slot_error(slot, get_texts().errors.read_failed)
        return False

    session.set_image(slot, payload)
    log.info("Stored image in slot", mime_type=payload.mime_type, size=len(payload.base64))
    return True
