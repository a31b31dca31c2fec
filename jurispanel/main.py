"""
FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jurispanel.api.v1.api import api_router
from jurispanel.core.config import settings
from jurispanel.core.logger import logger
from jurispanel.db.database import init_db
from jurispanel.middleware.correlation import CorrelationMiddleware
from jurispanel.services.workspace import ReviewWorkspace


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app.state.workspace = ReviewWorkspace()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    logger.info("%s shutting down", settings.APP_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    # available before startup runs (tests skip the lifespan)
    app.state.workspace = ReviewWorkspace()

    app.include_router(api_router, prefix="/api/v1")

    # ── Correlation ID middleware (must be added before CORS) ─────────────────
    app.add_middleware(CorrelationMiddleware)

    # ── CORS ──────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    @app.get("/")
    def read_root():
        logger.info("Root endpoint accessed")
        return {"message": f"{settings.APP_NAME} API is running", "version": settings.APP_VERSION, "docs": "/docs"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
