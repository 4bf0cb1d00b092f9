"""
FastAPI application for the review dashboard.

Serves the server-rendered dashboard page plus a small JSON API. The
dashboard view is activated (polling starts) when the app starts up and
deactivated when it shuts down.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from dashboard.data_sources import build_data_sources
from dashboard.view import DashboardView
from fetchers.reviews_api import ReviewsAPI
from models.config_models import DashboardConfig
from utils.config_loader import load_config
from utils.logger import setup_logger

STATIC_DIR = Path(__file__).parent / "static"

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[DashboardConfig] = None,
    view: Optional[DashboardView] = None,
    reviews_api: Optional[ReviewsAPI] = None
) -> FastAPI:
    """
    Build the dashboard application.

    Args:
        config: Dashboard configuration (default: loaded from environment)
        view: Pre-built view (default: live backend with demo fallback per config)
        reviews_api: Backend client (default: built from config)

    Returns:
        FastAPI: Configured application
    """
    if config is None:
        config = load_config()
        setup_logger(config.log_level)

    api = reviews_api or ReviewsAPI(config)
    if view is None:
        source, fallback = build_data_sources(api, demo_fallback=config.demo_fallback)
        view = DashboardView(source, fallback, refresh_interval_seconds=config.refresh_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        view.activate()
        try:
            yield
        finally:
            await view.deactivate()
            for source in (view.source, view.fallback):
                if source is not None:
                    source.close()
            # Session.close() is idempotent; the live source may already have closed it
            api.close()

    app = FastAPI(
        title="Review Dashboard",
        description="Code-review statistics and recent pull-request reviews",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.view = view
    app.state.reviews_api = api

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    from dashboard.routes import router
    app.include_router(router)

    logger.info(f"Dashboard app initialized (backend: {config.api_base_url})")
    return app
