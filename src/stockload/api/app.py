"""
CSV upload API.

FastAPI application factory. The database service is created in the
lifespan handler (or injected) and handed to endpoints through the
``get_db`` dependency.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockload.config import Settings
from stockload.database import DatabaseService, create_service
from stockload.errors import ImportFailure, MissingFileError
from stockload.ingestion import SKU, ensure_schema, import_csv

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


def get_db(request: Request) -> DatabaseService:
    return request.app.state.db


@router.post("/upload")
async def upload_csv(
    request: Request,
    file: UploadFile | None = File(None),
    db: DatabaseService = Depends(get_db),
):
    """
    Accept a CSV upload and insert its valid rows in one transaction.

    Returns:
        message, total parsed rows, inserted rows and skipped rows
    """
    if file is None:
        raise MissingFileError()

    content = await file.read()
    variant = request.app.state.settings.variant
    result = await run_in_threadpool(import_csv, db, content, variant)

    return {
        "message": "CSV processed successfully.",
        "total": result.total,
        "inserted": result.inserted,
        "skipped": result.skipped,
    }


async def health_check(request: Request):
    """Report whether the database answers."""
    db: DatabaseService = request.app.state.db
    healthy = await run_in_threadpool(db.ping)
    return {
        "status": "ok" if healthy else "degraded",
        "variant": request.app.state.settings.variant,
        "database": healthy,
    }


async def import_failure_handler(request: Request, exc: ImportFailure):
    if exc.status_code >= 500:
        logger.error("Upload failed: %s", exc.message)
    else:
        logger.info("Upload rejected: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Not Found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid upload request."})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    service: DatabaseService | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings; read from the environment when omitted
        service: Pre-connected database service. When omitted, one is
            created from settings.database_url and closed on shutdown.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        db = service if service is not None else create_service(
            settings.database_url, settings.pool_size
        )
        if owned:
            db.connect()
        try:
            # A database we cannot prepare is fatal to startup.
            ensure_schema(db, settings.variant)
            app.state.db = db
            logger.info(
                "Application started (variant=%s, database=%s)",
                settings.variant,
                db.dialect,
            )
            yield
        finally:
            logger.info("Application shutting down")
            if owned:
                db.close()

    app = FastAPI(title="stockload", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ImportFailure, import_failure_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    if settings.variant == SKU:
        app.include_router(router, prefix="/api")
    app.add_api_route("/health", health_check, methods=["GET"])

    return app
