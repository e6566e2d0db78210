# image_fusion/app.py
from collections.abc import Callable
from typing import Any

import aiojobs
from aiohttp import web

from image_fusion import utils
from image_fusion.data.settings import Settings, settings as default_settings
from image_fusion.middlewares import session_middleware, struct_logging_middleware
from image_fusion.services.clients.factory import get_ai_client
from image_fusion.states.session import MemorySessionStorage
from image_fusion.web_handlers import error_middleware, fusion_routes, result_routes


async def setup_aiohttp_app(
    settings: Settings | None = None,
    ai_client_factory: Callable[[Settings], Any] = get_ai_client,
) -> web.Application:
    settings = settings or default_settings
    logger = utils.logging.setup_logger(settings.logging_level).bind(type="web")

    app = web.Application(
        client_max_size=settings.web.max_upload_bytes,
        middlewares=[
            struct_logging_middleware,
            error_middleware,
            session_middleware,
        ],
    )
    app.add_routes(fusion_routes)
    app.add_routes(result_routes)

    app["settings"] = settings
    app["logger"] = logger
    app["ai_client_factory"] = ai_client_factory
    app["session_storage"] = MemorySessionStorage(
        max_sessions=settings.web.max_sessions,
        ttl_seconds=settings.web.session_ttl_seconds,
    )
    app["scheduler"] = aiojobs.Scheduler()
    app.on_startup.append(aiohttp_on_startup)
    app.on_shutdown.append(aiohttp_on_shutdown)
    return app


async def aiohttp_on_startup(app: web.Application) -> None:
    settings: Settings = app["settings"]
    app["logger"].info(
        "Image fusion server started",
        host=settings.web.listening_host,
        port=settings.web.listening_port,
        client=settings.fusion.client,
        model=settings.google.model,
        api_key_configured=settings.google.api_key is not None,
    )


async def aiohttp_on_shutdown(app: web.Application) -> None:
    scheduler: aiojobs.Scheduler = app["scheduler"]
    app["logger"].debug("Stopping fusion jobs", active=scheduler.active_count)
    # In-flight jobs are cancelled; their sessions end up in Failure.
    await scheduler.close()
    app["logger"].info("Stopped fusion jobs")


def main() -> None:
    web.run_app(
        setup_aiohttp_app(default_settings),
        handle_signals=True,
        host=default_settings.web.listening_host,
        port=default_settings.web.listening_port,
    )


if __name__ == "__main__":
    main()
