"""
Storm Analytics — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storm_analytics import __version__
from storm_analytics.config import INBOX_FOLDER, LOG_LEVEL, MIN_SUPPORT
from storm_analytics.data.loader import SchemaError
from storm_analytics.data.store import DataStore
from storm_analytics.api.dependencies import set_store
from storm_analytics.api.router_meta import router as meta_router
from storm_analytics.api.router_summary import router as summary_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s - %(levelname)s - %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load and clean all data at startup."""
    configure_logging()
    store = DataStore(min_support=MIN_SUPPORT)
    set_store(store)
    try:
        store.load(INBOX_FOLDER)
    except FileNotFoundError as exc:
        logger.warning("No data loaded: %s", exc)
    except SchemaError as exc:
        logger.error("Input rejected: %s", exc)

    if store.is_loaded:
        logger.info("Storm Analytics ready — %s events, %d categories",
                    f"{store.row_count():,}", len(store.categories()))
    else:
        logger.info("Storm Analytics ready — no data yet. Add files to %s and POST /api/reload", INBOX_FOLDER)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storm Analytics API",
        description="Severe-weather event categories, damage estimates and impact rankings",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(summary_router)
    return app


app = create_app()
