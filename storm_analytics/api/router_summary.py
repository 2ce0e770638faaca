"""
Aggregate endpoints: grouped summaries, impact rankings, totals.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from storm_analytics.data.store import DataStore
from storm_analytics.data.schemas import EventFilter, GroupBy
from storm_analytics.analytics.common import sanitize_for_json
from storm_analytics.analytics.impact import impact_totals, rank_categories
from storm_analytics.analytics.summary import summarize
from storm_analytics.api.dependencies import get_store, parse_filter, parse_group_by
from storm_analytics.api.response_models import TableResponse
from storm_analytics.config import RANKING_METRICS

router = APIRouter(prefix="/api", tags=["summary"])


def _label(filt: EventFilter | None) -> str:
    return (filt or EventFilter()).label


@router.get("/summary", response_model=TableResponse)
def grouped_summary(
    by: GroupBy = Depends(parse_group_by),
    filt: EventFilter | None = Depends(parse_filter),
    store: DataStore = Depends(get_store),
):
    table = summarize(store.events_for(by, filt), by)
    return TableResponse(filter=_label(filt), rows=sanitize_for_json(table.to_dict("records")))


@router.get("/rankings", response_model=TableResponse)
def rankings(
    metric: str = Query("HARM", description="|".join(RANKING_METRICS)),
    top: int | None = Query(None, ge=1),
    filt: EventFilter | None = Depends(parse_filter),
    store: DataStore = Depends(get_store),
):
    if metric.upper() not in RANKING_METRICS:
        raise HTTPException(400, f"Invalid metric: {metric}")
    table = rank_categories(store.get_events(filt), metric, top)
    return TableResponse(filter=_label(filt), rows=sanitize_for_json(table.to_dict("records")))


@router.get("/totals")
def totals(
    filt: EventFilter | None = Depends(parse_filter),
    store: DataStore = Depends(get_store),
):
    return sanitize_for_json({
        "filter": _label(filt),
        "years": store.year_range(filt),
        "totals": impact_totals(store.get_events(filt)),
    })
