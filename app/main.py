import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.downloads import router as downloads_router
from app.api.health import router as health_router
from app.api.seo import router as seo_router
from app.api.uploads import router as uploads_router
from app.api.videos import router as videos_router
from app.settings import ApiSettings
from core.db import DatabaseSettings, create_engine_from_settings, create_session_factory
from core.logging import setup_json_logging
from service.errors import DomainValidationError, NotFoundError, UpstreamStoreError
from service.health_service import API_VERSION
from storage.clients.catalog_store import CatalogStore, SqlCatalogStore
from storage.clients.object_store import ObjectStoreClient, ObjectStoreSettings

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    missing = []
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        if err.get("type") == "missing":
            missing.append(field or "body")
        else:
            problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    if missing:
        problems.insert(0, f"{', '.join(missing)} required")
    return "; ".join(problems) or "Invalid request"


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError):
        logger.warning("Domain validation error", extra={
            "status_code": 400,
            "error_type": exc.code,
            "error_message": exc.message
        })
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning("Request validation error", extra={
            "status_code": 400,
            "error_type": "VALIDATION_FAILED",
            "error_message": message
        })
        return _error(400, message)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.warning("Not found", extra={"status_code": 404, "error_message": exc.message})
        return _error(404, exc.message)

    @app.exception_handler(UpstreamStoreError)
    async def upstream_handler(request: Request, exc: UpstreamStoreError):
        logger.error("Upstream store error", extra={
            "status_code": 500,
            "error_type": exc.code,
            "error_message": exc.message
        })
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={
            "status_code": 500,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        })
        return _error(500, str(exc) or "Internal server error")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)},
                            headers=getattr(exc, "headers", None))


def create_app(
    settings: Optional[ApiSettings] = None,
    catalog_store: Optional[CatalogStore] = None,
    object_store: Optional[ObjectStoreClient] = None
) -> FastAPI:
    """
    Build the API application.

    Stores that are not passed in are built from the environment when the
    application starts; missing backend configuration aborts startup.
    """
    settings = settings or ApiSettings()
    setup_json_logging(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        owned_objects = None
        store = catalog_store
        objects = object_store

        try:
            db_settings = DatabaseSettings() if store is None else None
            storage_settings = ObjectStoreSettings() if objects is None else None
        except ValidationError as e:
            logger.critical("Backend configuration missing; set DATABASE_URL, STORAGE_URL and STORAGE_KEY",
                            extra={"trace_id": "system_init", "error_message": str(e)})
            raise

        if db_settings is not None:
            engine = create_engine_from_settings(db_settings)
            store = SqlCatalogStore(create_session_factory(engine))
        if storage_settings is not None:
            owned_objects = objects = ObjectStoreClient(storage_settings)

        app.state.settings = settings
        app.state.catalog_store = store
        app.state.object_store = objects

        logger.info("Video API started", extra={
            "trace_id": "system_init",
            "mode": settings.feed_mode.value,
            "limit": settings.feed_page_size
        })
        try:
            yield
        finally:
            if owned_objects is not None:
                await owned_objects.aclose()
            if engine is not None:
                await engine.dispose()

    app = FastAPI(title="Video Catalog API", version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    add_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(videos_router)
    app.include_router(uploads_router)
    app.include_router(downloads_router)
    app.include_router(seo_router)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = ApiSettings()
    uvicorn.run(app, host=settings.host, port=settings.port, lifespan="on", log_config=None)


if __name__ == "__main__":
    main()
