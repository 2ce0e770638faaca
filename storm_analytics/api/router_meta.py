"""
Meta endpoints: health, categories, years, diagnostics, reload.
"""
from __future__ import annotations

import logging
import threading

from fastapi import APIRouter, Depends

from storm_analytics.data.store import DataStore
from storm_analytics.api.dependencies import get_store, get_store_or_empty
from storm_analytics.api.response_models import (
    HealthResponse, CategoriesResponse, YearsResponse, DiagnosticsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok" if store.is_loaded else "empty",
        rows=store.row_count(),
        geographic_rows=store.geographic_count(),
        categories=len(store.categories()),
        years=len(store.years_available()),
    )


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(store: DataStore = Depends(get_store)):
    return CategoriesResponse(categories=store.categories(), dropped=store.dropped_categories)


@router.get("/years", response_model=YearsResponse)
def list_years(store: DataStore = Depends(get_store)):
    return YearsResponse(years=store.years_available())


@router.get("/diagnostics", response_model=DiagnosticsResponse)
def diagnostics(store: DataStore = Depends(get_store)):
    return DiagnosticsResponse(min_support=store.min_support, diagnostics=store.diagnostics.as_dict())


@router.post("/reload")
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-run the cleaning pipeline over the store's source.

    Returns immediately, reload happens in background.
    """
    def _do_reload():
        try:
            store.load(store.source)
        except (FileNotFoundError, ValueError):
            logger.exception("Reload failed; keeping previously loaded data")
            return
        logger.info("Reload complete — %s rows", f"{store.row_count():,}")

    threading.Thread(target=_do_reload, daemon=True).start()
    return {
        "status": "reloading",
        "message": "Data reload started in background. Check /api/health for updated row counts.",
    }
