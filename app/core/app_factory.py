from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.subscription_service import SubscriptionService
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import analytics as analytics_router
from ..presentation.api.routers import subscriptions as subscriptions_router

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title=settings.app_title, lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.include_router(subscriptions_router.router)
    app.include_router(analytics_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {"ok": True, "database": container.persistence.ping()}

    return app


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        persistence = SQLitePersistence(settings.database_path)
        subscription_service = SubscriptionService(
            persistence,
            logger=logging.getLogger("app.subscriptions"),
        )

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            subscription_service=subscription_service,
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("%s started with database %s", settings.app_title, settings.database_path)

        try:
            yield
        finally:
            persistence.close()
            logger.info("%s stopped", settings.app_title)

    return lifespan
