"""
/admin router
-------------
Operational endpoints.

GET  /admin/health  — Liveness check (Supabase voice tables reachable)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from voice_context.models.api.voice_context import HealthResponse
from voice_context.supabase.record_store import RECORDINGS_TABLE
from voice_context.supabase.summary_store import SUMMARIES_TABLE
from voice_context.supabase.supabase_client import get_supabase

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """
    Liveness + dependency check.

    Runs a one-row select against both voice tables.
    """
    try:
        sb = get_supabase()
        for table in (RECORDINGS_TABLE, SUMMARIES_TABLE):
            sb.table(table).select("id").limit(1).execute()
    except Exception as e:
        detail = f"Supabase unreachable: {e}"
        logger.error(detail)
        return HealthResponse(status="degraded", supabase=False, detail=detail)

    return HealthResponse(status="ok", supabase=True)
