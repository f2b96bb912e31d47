"""
voice_context/tools/voice_context_tools.py
------------------------------------------
LangChain tools that agents use to read an owner's voice memory.
"""
from __future__ import annotations

from uuid import UUID

from langchain_core.tools import tool

from voice_context.dependencies import get_relevance_service, get_voice_context_service


@tool
def get_voice_context(owner_id: str) -> str:
    """Get the user's voice-note memory: today's notes in full, plus summaries
    of the past 2 days, past week and past month. Use this before answering
    anything that depends on what the user has said recently."""
    ctx = get_voice_context_service().get_combined_context(UUID(owner_id))
    return ctx.combined_context


@tool
def search_voice_notes(query: str, owner_id: str) -> str:
    """Keyword search over the user's voice notes from the last 30 days.
    Use this to find what the user said about a specific person, place or topic."""
    result = get_relevance_service().find_relevant(query, UUID(owner_id))
    if not result.relevant_records:
        return result.context_summary
    header = f"Found {len(result.relevant_records)} relevant voice notes:\n\n"
    return header + result.context_summary
