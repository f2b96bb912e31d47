"""Pydantic models for the /voice-context and /voice-summaries routers."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ── Request models ────────────────────────────────────────────────────────────


class RelevantContextRequest(BaseModel):
    owner_id: UUID
    query: str = Field(min_length=1)


class StalenessSweepRequest(BaseModel):
    """Request body for POST /voice-summaries/staleness/sweep."""

    owner_ids: List[str] = Field(default_factory=list)


# ── Response models ───────────────────────────────────────────────────────────


class StalenessResponse(BaseModel):
    owner_id: UUID
    period_type: str
    period_start: date
    missing: bool
    missing_period_start: Optional[date] = None
    error: Optional[str] = None


class StalenessSweepResponse(BaseModel):
    status: str
    missing_owner_ids: List[str] = Field(default_factory=list)
    reports: List[Dict[str, Any]] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str             # "ok" | "degraded"
    supabase: bool
    detail: Optional[str] = None
