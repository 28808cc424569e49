from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from product_api.api.routes import router as api_router
from product_api.core.config import Settings, get_settings
from product_api.core.db import Database
from product_api.core.logging import configure_logging, get_logger
from product_api.middlewares.errors import register_exception_handlers
from product_api.middlewares.request_id import RequestIdMiddleware

logger = get_logger(__name__)

ENDPOINTS = {
    "GET /api/products": "Get all products",
    "GET /api/products/:id": "Get single product",
    "POST /api/products": "Create new product",
    "PUT /api/products/:id": "Update product",
    "DELETE /api/products/:id": "Delete product",
    "GET /api/health": "Health check",
}


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, sql_echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(settings.database_url_resolved)
        db.create_all()
        app.state.db = db
        logger.info(
            "%s %s started env=%s listening on http://%s:%s (health: /api/health)",
            settings.app_name,
            settings.app_version,
            settings.environment,
            settings.host,
            settings.port,
        )
        try:
            yield
        finally:
            db.dispose()

    # no trailing-slash redirects: unknown paths get the JSON 404 envelope
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def info(request: Request):
        return {
            "success": True,
            "message": "Welcome to Product CRUD API",
            "version": settings.app_version,
            "endpoints": ENDPOINTS,
            "documentation": f"{request.base_url}docs",
        }

    app.include_router(api_router)
    return app


app = create_app()
