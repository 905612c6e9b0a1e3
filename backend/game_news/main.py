import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import StoreUnavailable
from .ingest.factory import create_source
from .ingest.source import IngestionSource
from .routers.admin import router as admin_router
from .routers.bookmarks import router as bookmarks_router
from .routers.health import router as health_router
from .routers.news import router as news_router
from .routers.users import router as users_router
from .scheduler import create_scheduler
from .security import generate_secret
from .storage.base import Storage
from .storage.factory import create_storage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    source: Optional[IngestionSource] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.state.settings = settings
    app.state.storage = storage
    app.state.source = source or create_source(settings)
    app.state.scheduler = None
    app.state.session_secret = settings.session_secret
    if not app.state.session_secret:
        logger.warning("[app] SESSION_SECRET not set; generated one, sessions will not survive a restart")
        app.state.session_secret = generate_secret()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Admin-Token"],
    )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("[app] storage unavailable on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    @app.exception_handler(RequestValidationError)
    async def invalid_input_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    # Routers
    app.include_router(health_router, prefix="/api")
    app.include_router(news_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(bookmarks_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    @app.on_event("startup")
    def on_startup() -> None:
        if app.state.storage is None:
            app.state.storage = create_storage(settings)
        if settings.run_scheduler:
            scheduler = create_scheduler(settings, app.state.storage, app.state.source)
            scheduler.start()
            app.state.scheduler = scheduler
            logger.info("[app] ingestion every %d minutes", settings.ingest_interval_minutes)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        # stop future ticks; an in-flight tick finishes on its own
        if app.state.scheduler is not None:
            app.state.scheduler.shutdown(wait=False)
            app.state.scheduler = None
        app.state.source.close()
        if app.state.storage is not None:
            app.state.storage.close()

    return app


app = create_app()
