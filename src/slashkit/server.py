"""FastAPI app serving an :class:`~slashkit.application.Application` over HTTP."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from slashkit.application import Application
from slashkit.cache import DatabaseCache
from slashkit.config import Settings, load_settings
from slashkit.errors import (
    CommandNotFound,
    ComponentNotFound,
    ExpiredComponentState,
    InteractionHandlerTimedOut,
    UnauthorizedInteraction,
    UnknownInteractionType,
)
from slashkit.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER

log = logging.getLogger(__name__)

StartupHook = Callable[[Application], Awaitable[None]]

# Exception -> (status, error code) for failures that happen before any response.
_ERROR_STATUS: dict[type[Exception], tuple[int, str]] = {
    UnauthorizedInteraction: (401, "UNAUTHORIZED"),
    ValidationError: (400, "INVALID_INTERACTION"),
    UnknownInteractionType: (400, "UNKNOWN_INTERACTION_TYPE"),
    CommandNotFound: (404, "UNKNOWN_COMMAND"),
    ComponentNotFound: (404, "UNKNOWN_COMPONENT"),
    ExpiredComponentState: (410, "COMPONENT_STATE_EXPIRED"),
    InteractionHandlerTimedOut: (504, "INTERACTION_TIMED_OUT"),
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        d = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            d["exception"] = self.formatException(record.exc_info)
        return json.dumps(d)


def configure_logging(log_format: str = "json") -> None:
    """Configure structured JSON logging (or plain text for dev)."""
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for h in root.handlers[:]:
        root.removeHandler(h)
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": code, "message": message}})


def _log_late_failure(task: asyncio.Future[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None and not isinstance(exc, InteractionHandlerTimedOut):
        log.error("Interaction handler failed after responding", exc_info=exc)


# --- Health ---
_health_router = APIRouter(tags=["health"])


@_health_router.get("/health")
async def health():
    return {"status": "ok"}


def create_app(
    application: Application | None = None,
    settings: Settings | None = None,
    *,
    on_startup: StartupHook | None = None,
) -> FastAPI:
    """Build the webhook app.

    ``on_startup`` runs once the cache is ready and is the place to register
    commands (``await app.sync_commands(...)``).
    """
    settings = settings or load_settings()
    if application is None:
        application = Application.from_settings(settings)
    server_cfg = settings.server

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(server_cfg.log_format)
        cache = application.components.cache
        if isinstance(cache, DatabaseCache):
            await cache.create_tables()
        if not server_cfg.verify_signatures:
            log.warning("Signature verification is disabled (SLASHKIT_SERVER_VERIFY_SIGNATURES=false)")
        if on_startup is not None:
            await on_startup(application)
        log.info("Serving interactions for application %s at %s", application.client_id, server_cfg.path)
        yield
        await application.close()

    app = FastAPI(title="slashkit", version="0.1.0", lifespan=lifespan)
    app.state.application = application

    @app.post(server_cfg.path)
    async def interactions(request: Request) -> Response:
        body = await request.body()
        loop = asyncio.get_running_loop()
        delivered: asyncio.Future[dict[str, Any]] = loop.create_future()

        async def send(response: dict[str, Any]) -> None:
            if not delivered.done():
                delivered.set_result(response)

        signature = request.headers.get(SIGNATURE_HEADER) if server_cfg.verify_signatures else False
        task = asyncio.ensure_future(
            application.handle_interaction(send, body, signature, request.headers.get(TIMESTAMP_HEADER))
        )
        await asyncio.wait({task, delivered}, return_when=asyncio.FIRST_COMPLETED)

        # The handler may keep running (follow-ups etc.) after the response is out.
        if delivered.done():
            task.add_done_callback(_log_late_failure)
            return JSONResponse(delivered.result())

        try:
            task.result()
        except Exception as exc:
            for exc_type, (status_code, code) in _ERROR_STATUS.items():
                if isinstance(exc, exc_type):
                    return error_response(status_code, code, str(exc))
            log.error("Interaction handler failed", exc_info=exc)
            return error_response(500, "INTERNAL_ERROR", "Interaction handler failed.")
        return Response(status_code=204)

    app.include_router(_health_router)
    return app
