import logging
from contextlib import asynccontextmanager
from textwrap import dedent
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from drive_relay.cache import FolderCache, InMemoryFolderCache
from drive_relay.config.settings import Settings, get_settings
from drive_relay.dispatcher import UploadDispatcher
from drive_relay.drive.client import DriveGateway, GoogleDriveClient
from drive_relay.drive.folders import SubfolderResolver
from drive_relay.errors import (
    RelayError,
    handle_broad_exceptions,
    handle_http_exceptions,
    handle_relay_errors,
    handle_request_validation_errors,
)
from drive_relay.routers.health import router as health_router
from drive_relay.routers.upload import router as upload_router
from drive_relay.worker_pool import BoundedWorkerPool

# Set up logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A failed refresh is not fatal: the relay keeps serving and
    # individual uploads report the auth error instead.
    ok = await app.state.drive.verify_credentials()
    if not ok:
        logger.warning("[AUTH] credentials could not be refreshed; uploads will fail until fixed")
    yield


def create_app(
    settings: Optional[Settings] = None,
    drive: Optional[DriveGateway] = None,
    cache: Optional[FolderCache] = None,
) -> FastAPI:
    """Create the upload relay application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Drive Relay",
        summary="Relay browser uploads into a Google Drive folder",
        version="v1",
        description=dedent(
            """\
        Accepts multipart uploads and stores them in a fixed Google Drive folder
        (optionally inside a named subfolder) using a pre-authorized refresh token.
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    drive = drive or GoogleDriveClient.from_settings(settings)
    pool = BoundedWorkerPool(max_workers=settings.upload_concurrency)
    app.state.settings = settings
    app.state.drive = drive
    app.state.pool = pool
    app.state.resolver = SubfolderResolver(drive, cache if cache is not None else InMemoryFolderCache())
    app.state.dispatcher = UploadDispatcher(drive, pool)
    logger.info(
        "Relay configured: root folder %s, concurrency %d",
        settings.drive_folder_id,
        settings.upload_concurrency,
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(upload_router, tags=["upload"])

    app.add_exception_handler(RelayError, handle_relay_errors)
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(StarletteHTTPException, handle_http_exceptions)
    app.middleware("http")(handle_broad_exceptions)

    # Registered last so it wraps everything, error responses included.
    # Requests without an Origin header pass straight through.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_origin_regex=settings.cors_preview_origin_regex,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"
