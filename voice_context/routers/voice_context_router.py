"""
/voice-context router
---------------------
Read side of the voice memory, for agent prompt builders.

GET  /voice-context/{owner_id}         — Combined tiered context (primary entry point)
GET  /voice-context/{owner_id}/today   — Today's notes only
GET  /voice-context/{owner_id}/stats   — Record and summary counts
POST /voice-context/relevant           — Keyword search over the last 30 days
"""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from voice_context.dependencies import get_relevance_service, get_voice_context_service
from voice_context.models.api.voice_context import RelevantContextRequest
from voice_context.models.domain.voice import (
    RelevanceResult,
    TodayContext,
    VoiceContext,
    VoiceContextStats,
)
from voice_context.services.relevance_service import RelevanceService
from voice_context.services.voice_context_service import VoiceContextService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/voice-context", tags=["voice-context"])


# ── POST /voice-context/relevant ──────────────────────────────────────────────
# Declared before the /{owner_id} routes so the path is never read as an id.

@router.post("/relevant", response_model=RelevanceResult)
def find_relevant_context(
    req: RelevantContextRequest,
    svc: RelevanceService = Depends(get_relevance_service),
) -> RelevanceResult:
    """
    Score the owner's recent recordings against the query words.

    Always returns 200; an empty match list comes with the
    "No relevant voice recordings found." summary.
    """
    return svc.find_relevant(req.query, req.owner_id)


# ── GET /voice-context/{owner_id} ─────────────────────────────────────────────

@router.get("/{owner_id}", response_model=VoiceContext)
def get_combined_context(
    owner_id: UUID,
    svc: VoiceContextService = Depends(get_voice_context_service),
) -> VoiceContext:
    """
    Today + past 2 days + past week + past month, fetched in parallel.

    Store failures degrade individual tiers; the response is still 200.
    """
    return svc.get_combined_context(owner_id)


@router.get("/{owner_id}/today", response_model=TodayContext)
def get_today_context(
    owner_id: UUID,
    svc: VoiceContextService = Depends(get_voice_context_service),
) -> TodayContext:
    return svc.get_today_context(owner_id)


@router.get("/{owner_id}/stats", response_model=VoiceContextStats)
def get_voice_context_stats(
    owner_id: UUID,
    svc: VoiceContextService = Depends(get_voice_context_service),
) -> VoiceContextStats:
    try:
        return svc.get_stats(owner_id)
    except Exception as e:
        logger.exception("Voice context stats failed")
        raise HTTPException(status_code=500, detail=f"Voice context stats failed: {e}")
