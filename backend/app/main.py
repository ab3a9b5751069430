import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers import files as files_router
from app.api.routers import health as health_router
from app.core.config import SERVICE_VERSION, get_settings
from app.core.errors import register_error_handlers
from app.core.limits import UploadSizeLimitMiddleware
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "NFT Upload API v%s serving %s as %s",
        SERVICE_VERSION,
        settings.storage_root,
        settings.public_base_url,
    )
    logger.info("Max upload size: %d bytes", settings.max_upload_bytes)
    if "*" in settings.cors_allow_origins and settings.env == "prod":
        logger.warning("CORS allows any origin; restrict CORS_ALLOW_ORIGINS in production")
    yield
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        debug=settings.debug,
        title="NFT Upload API",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(UploadSizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router.router)
    app.include_router(files_router.router)

    return app


app = create_app()
