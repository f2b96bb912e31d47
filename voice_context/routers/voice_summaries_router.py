"""
/voice-summaries router
-----------------------
Write side of the summary cache, used by the generation job and scheduler.

POST /voice-summaries/upsert                — Save (replace) a period summary
GET  /voice-summaries/{owner_id}/staleness  — Is yesterday's daily summary missing?
POST /voice-summaries/staleness/sweep       — Staleness check across many owners
"""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from voice_context.dependencies import get_summary_service
from voice_context.models.api.voice_context import (
    StalenessResponse,
    StalenessSweepRequest,
    StalenessSweepResponse,
)
from voice_context.models.domain.voice import PeriodSummaryUpsert, SummaryWriteResult
from voice_context.services.summary_service import SummaryService
from voice_context.workflows.staleness_sweep_workflow import build_staleness_sweep_graph

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/voice-summaries", tags=["voice-summaries"])


# ── POST /voice-summaries/upsert ──────────────────────────────────────────────

@router.post("/upsert", response_model=SummaryWriteResult)
def upsert_voice_summary(
    req: PeriodSummaryUpsert,
    svc: SummaryService = Depends(get_summary_service),
) -> SummaryWriteResult:
    """
    Idempotent upsert keyed on (owner_id, period_type, period_start).

    A second call for the same key replaces the stored summary entirely.
    """
    result = svc.save_summary(req)
    if not result.success:
        raise HTTPException(status_code=500, detail=f"Saving voice summary failed: {result.error}")
    return result


# ── GET /voice-summaries/{owner_id}/staleness ─────────────────────────────────

@router.get("/{owner_id}/staleness", response_model=StalenessResponse)
def check_staleness(
    owner_id: UUID,
    svc: SummaryService = Depends(get_summary_service),
) -> StalenessResponse:
    report = svc.check_staleness(owner_id)
    return StalenessResponse(
        owner_id=report.owner_id,
        period_type=report.period_type.value,
        period_start=report.period_start,
        missing=report.missing,
        missing_period_start=report.missing_period_start,
        error=report.error,
    )


# ── POST /voice-summaries/staleness/sweep ─────────────────────────────────────

@router.post("/staleness/sweep", response_model=StalenessSweepResponse)
def sweep_staleness(
    req: StalenessSweepRequest,
    svc: SummaryService = Depends(get_summary_service),
) -> StalenessSweepResponse:
    """Run the sweep workflow synchronously and return the owners to regenerate."""
    app = build_staleness_sweep_graph(service=svc)
    result = app.invoke({"owner_ids": req.owner_ids})

    if result.get("status") == "failed":
        raise HTTPException(status_code=400, detail=result.get("error") or "Staleness sweep failed")

    return StalenessSweepResponse(
        status=result.get("status", "complete"),
        missing_owner_ids=result.get("missing_owner_ids", []),
        reports=result.get("reports", []),
        warnings=result.get("warnings", []),
    )
