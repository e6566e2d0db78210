# image_fusion/services/fusion_worker.py
import asyncio
import time
from collections.abc import Callable
from typing import Any

import structlog

from image_fusion.data.settings import Settings
from image_fusion.data.texts import get_texts
from image_fusion.dto.outcome import Failure, Loading, Success
from image_fusion.services import fusion_request
from image_fusion.services.fusion_request import FusionInputs
from image_fusion.services.clients.google_ai_client import summarize_response
from image_fusion.states.session import FusionSession

logger = structlog.get_logger(__name__)


class FusionInFlightError(RuntimeError):
    """A dispatch was attempted while the session is still Loading."""


def begin_fusion(session: FusionSession, settings: Settings) -> FusionInputs | None:
    """
    Starts a dispatch: either fails it on the spot or moves it to Loading.

    Returns the inputs the request must be sent with, captured now so that
    uploads arriving before the job runs cannot change them, or None when the
    dispatch was rejected. Nothing here awaits, so two concurrent dispatches
    for one session cannot both pass.
    """
    if session.is_loading:
        raise FusionInFlightError("A fusion request is already in flight for this session.")

    blocked = fusion_request.check_preconditions(session, settings)
    if blocked:
        logger.info("Fusion dispatch rejected", reason=blocked)
        session.outcome = Failure(message=blocked)
        return None

    inputs = FusionInputs.from_session(session)
    session.outcome = Loading()
    return inputs


async def run_fusion(
    session: FusionSession,
    inputs: FusionInputs,
    settings: Settings,
    ai_client_factory: Callable[[Settings], Any],
) -> None:
    """
    Sends the fusion request and records its outcome on the session.

    There is no retry: one failed attempt ends the request. Whatever happens,
    the session does not stay in Loading once this returns.
    """
    model = settings.google.model
    log = logger.bind(model=model, action=inputs.action.value)
    errors = get_texts().errors
    start_time = time.monotonic()

    try:
        ai_client = ai_client_factory(settings)
        contents = fusion_request.build_fusion_contents(
            inputs.first_image, inputs.second_image, inputs.action
        )
        response = await ai_client.models.generate_content(
            model=model,
            contents=contents,
            config=fusion_request.build_generation_config(),
        )
        outcome = fusion_request.outcome_from_response(response)
        if isinstance(outcome, Success):
            log.info(
                "Fusion image received",
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
        else:
            log.warning("Model returned no image", payload=summarize_response(response))
        session.outcome = outcome
    except asyncio.CancelledError:
        log.warning("Fusion request cancelled")
        raise
    except Exception as e:
        log.exception("Fusion request failed")
        session.outcome = Failure(message=errors.service_error.format(error=e))
    finally:
        if session.is_loading:
            session.outcome = Failure(message=errors.interrupted)
