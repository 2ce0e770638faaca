"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    rows: int
    geographic_rows: int
    categories: int
    years: int


class CategoriesResponse(BaseModel):
    categories: list[str]
    dropped: list[str]


class YearsResponse(BaseModel):
    years: list[int]


class DiagnosticsResponse(BaseModel):
    min_support: int
    diagnostics: dict[str, int]


class TableResponse(BaseModel):
    """Generic wrapper for an aggregate table."""
    filter: str
    rows: list[dict[str, Any]]
