"""
voice_context/dependencies.py
-----------------------------
Wires the Supabase-backed stores into the services. Routers take these as
FastAPI dependencies so tests can swap in in-memory stores with
app.dependency_overrides.
"""
from __future__ import annotations

from functools import lru_cache

from voice_context.config import VoiceContextConfig
from voice_context.services.clock import Clock
from voice_context.services.relevance_service import RelevanceService
from voice_context.services.summary_service import SummaryService
from voice_context.services.voice_context_service import VoiceContextService
from voice_context.supabase.record_store import SupabaseRecordReader
from voice_context.supabase.summary_store import SupabaseSummaryStore
from voice_context.supabase.supabase_client import get_supabase


@lru_cache(maxsize=1)
def get_config() -> VoiceContextConfig:
    return VoiceContextConfig.from_env()


def get_clock() -> Clock:
    return Clock(get_config().timezone)


def get_voice_context_service() -> VoiceContextService:
    sb = get_supabase()
    return VoiceContextService(
        SupabaseRecordReader(sb),
        SupabaseSummaryStore(sb),
        clock=get_clock(),
        config=get_config(),
    )


def get_relevance_service() -> RelevanceService:
    return RelevanceService(
        SupabaseRecordReader(get_supabase()),
        clock=get_clock(),
        config=get_config(),
    )


def get_summary_service() -> SummaryService:
    return SummaryService(
        SupabaseSummaryStore(get_supabase()),
        clock=get_clock(),
        config=get_config(),
    )
