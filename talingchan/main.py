import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from talingchan.api import cards_router, exports_router, health_router, sessions_router
from talingchan.config import settings
from talingchan.models.failure import (
    KnownError,
    RefusalError,
    create_unknown_failure,
    finalize_response,
)
from talingchan.services.catalog import CardCatalog
from talingchan.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    app.state.catalog = CardCatalog()
    app.state.sessions = SessionStore()

    # The catalog loads in the background; /ready reports 503 until it finishes
    load_task: asyncio.Task[None] | None = None
    if settings.load_catalog_on_startup:
        load_task = asyncio.create_task(
            app.state.catalog.load(settings.api_url, timeout=settings.request_timeout)
        )
    else:
        app.state.catalog.loaded = True

    yield

    if load_task is not None and not load_task.done():
        load_task.cancel()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("talingchan"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(sessions_router)
app.include_router(exports_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.exception_handler(RefusalError)
async def refusal_handler(_request: Request, exc: RefusalError) -> JSONResponse:
    envelope = finalize_response(exc.to_response())
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump(mode="json"))


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    envelope = finalize_response(exc.to_response())
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    envelope = create_unknown_failure(exc)
    return JSONResponse(status_code=500, content=envelope.model_dump(mode="json"))
