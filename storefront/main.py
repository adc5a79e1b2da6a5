# storefront/main.py
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from storefront.config import Settings, get_settings
from storefront.database import build_engine, build_session_factory, init_db
from storefront.seed import seed_catalog
from storefront.services.notifiers import build_notifiers
from storefront.storage import MemoryStorage, SqlStorage
from storefront.utils.uploads import LocalProofStore, UPLOADS_URL_PREFIX

# Routers
from storefront.routes.auth import router as auth_router
from storefront.routes.cart import router as cart_router
from storefront.routes.orders import router as orders_router
from storefront.routes.products import router as products_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _init_storage(app: FastAPI, settings: Settings) -> None:
    if settings.STORAGE_BACKEND == "memory":
        app.state.memory_storage = MemoryStorage()
        app.state.session_factory = None
        if settings.SEED_CATALOG:
            seed_catalog(app.state.memory_storage)
        return

    engine = build_engine(settings.database_url)
    init_db(engine)
    app.state.memory_storage = None
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    if settings.SEED_CATALOG:
        db = app.state.session_factory()
        try:
            seed_catalog(SqlStorage(db))
        finally:
            db.close()


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Storefront API", version="1.0.0")
    app.state.settings = settings

    _init_storage(app, settings)

    # Uploads - make sure the directory exists before mounting it
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(upload_dir)), name="uploads")
    app.state.proof_store = LocalProofStore(upload_dir)
    app.state.notifiers = build_notifiers(settings)
    logger.info(
        "Storefront starting with %s storage and %s back-office notifier(s)",
        settings.STORAGE_BACKEND, len(app.state.notifiers),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Malformed input is a 400, not FastAPI's default 422
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # Register routers
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(orders_router)

    @app.get("/")
    def read_root():
        return {"message": "Storefront API is running"}

    return app


app = create_app()
