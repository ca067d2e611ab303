"""
Payments Service
REST interface over the payment record collection
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import os
import subprocess

from shared.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from payments_service.api.routes import router as payments_router
from payments_service.core_settings import Settings, get_settings
from payments_service.domain.exceptions import PaymentError
from payments_service.infrastructure.db import build_engine, build_session_factory, init_models

SERVICE_NAME = "payments-service"
SERVICE_DESCRIPTION = "Payment record lifecycle service"
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..")

logger = get_logger(__name__)

def run_migrations():
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        logger.warning(f"Migration output: {result.stderr}")
    else:
        logger.info("Database migrations completed")

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"Starting {SERVICE_NAME} version {settings.SERVICE_VERSION}")

    if settings.RUN_MIGRATIONS:
        try:
            run_migrations()
        except OSError as e:
            logger.error(f"Migration error: {e}")

    try:
        init_models(app.state.engine, settings.PAYMENTS_COLLECTION)
        logger.info(f"Collection {settings.PAYMENTS_COLLECTION} ready")
    except Exception as e:
        logger.error(f"Failed to initialize database models: {e}")
        raise

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    app.state.engine.dispose()

def install_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def invalid_payload_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            f"Invalid payload: {request.method} {request.url.path}",
            extra={'extra_fields': {'errors': exc.errors()}}
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request payload"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError):
        logger.warning(f"Unmapped payment error: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    settings.validate_store()

    os.environ.setdefault("ENVIRONMENT", settings.ENVIRONMENT)
    os.environ.setdefault("SERVICE_VERSION", settings.SERVICE_VERSION)
    setup_logging(service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

    engine = build_engine(settings)

    app = FastAPI(
        title=SERVICE_NAME,
        description=SERVICE_DESCRIPTION,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    install_error_handlers(app)

    health_service = ServiceHealth(SERVICE_NAME, settings.SERVICE_VERSION, engine, settings.PAYMENTS_COLLECTION)
    app.include_router(health_service.create_health_router())
    app.include_router(payments_router)

    @app.get("/")
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "status": "running",
            "docs": "/api/docs"
        }

    @app.get("/info")
    async def info():
        return {
            "service": SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "description": SERVICE_DESCRIPTION,
            "environment": settings.ENVIRONMENT,
            "collection": settings.PAYMENTS_COLLECTION,
            "endpoints": {
                "payments": "/payments",
                "payment": "/payment/{id}",
                "health": "/health",
                "ready": "/health/ready",
                "live": "/health/live",
                "metrics": "/metrics",
                "docs": "/api/docs"
            }
        }

    return app

app = create_app()
