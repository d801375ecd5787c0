"""
FastAPI application entry point.
Challenge: Mount routes, error handlers, metrics, and the expiry sweeper lifecycle.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from auction_house.api.error_handlers import register_error_handlers
from auction_house.api.v1.router import api_router
from auction_house.cache.redis_client import close_redis
from auction_house.config import get_settings
from auction_house.db.session import async_session_maker
from auction_house.logging_config import setup_logging
from auction_house.services.expiry_sweeper import ExpirySweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging and the expiry sweeper. Shutdown: stop the sweeper, close Redis."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.sweeper = None
    if settings.sweeper_enabled:
        app.state.sweeper = ExpirySweeper(
            async_session_maker,
            interval=settings.sweeper_interval_seconds,
            max_backoff=settings.sweeper_max_backoff_seconds,
        )
        app.state.sweeper.start()
    yield
    if app.state.sweeper is not None:
        await app.state.sweeper.stop()
    await close_redis()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Game marketplace: characters list item instances as fixed-price auctions and buy them with gold.",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
