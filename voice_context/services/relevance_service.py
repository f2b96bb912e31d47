"""
voice_context/services/relevance_service.py
-------------------------------------------
Keyword relevance lookup over an owner's recent voice recordings.

Scoring
-------
  +1    per query token found anywhere in the text (substring)
  +0.5  per whole-word occurrence of that token

Tokens shorter than three characters are dropped as noise. Ties keep the
store order (most recent first).
"""
from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from voice_context.config import VoiceContextConfig
from voice_context.models.domain.voice import (
    NO_RELEVANT_RECORDS,
    RelevanceResult,
    RelevantRecording,
    VoiceRecord,
)
from voice_context.services.clock import Clock
from voice_context.supabase.record_store import RecordReader

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3
SUBSTRING_SCORE = 1.0
WORD_BOUNDARY_SCORE = 0.5


def tokenize_query(query: str) -> List[str]:
    return [w for w in query.lower().split() if len(w) >= MIN_TOKEN_LENGTH]


def score_text(text: str, tokens: List[str]) -> float:
    lowered = text.lower()
    score = 0.0
    for token in tokens:
        if token not in lowered:
            continue
        score += SUBSTRING_SCORE
        hits = re.findall(rf"\b{re.escape(token)}\b", lowered)
        score += len(hits) * WORD_BOUNDARY_SCORE
    return score


def rank_records(
    records: List[VoiceRecord],
    tokens: List[str],
    top_k: int,
) -> List[RelevantRecording]:
    scored = [
        RelevantRecording(
            id=r.id,
            text=r.text,
            timestamp=r.created_at,
            relevance_score=score_text(r.text, tokens),
        )
        for r in records
        if r.text
    ]
    scored = [r for r in scored if r.relevance_score > 0]
    # sorted() is stable: equal scores keep store order
    scored.sort(key=lambda r: r.relevance_score, reverse=True)
    return scored[:top_k]


class RelevanceService:
    def __init__(
        self,
        records: RecordReader,
        *,
        clock: Optional[Clock] = None,
        config: Optional[VoiceContextConfig] = None,
    ):
        self.records = records
        self.config = config or VoiceContextConfig()
        self.clock = clock or Clock(self.config.timezone)

    def find_relevant(self, query: str, owner_id: UUID) -> RelevanceResult:
        """Top-scoring recent recordings for ``query``, plus a prompt-ready rendering."""
        since = self.clock.now() - timedelta(days=self.config.search_window_days)
        try:
            candidates = self.records.list_records(
                owner_id,
                start=since,
                limit=self.config.search_record_limit,
                ascending=False,
            )
        except Exception as e:
            logger.warning("Relevance search read failed for owner=%s: %s", owner_id, e)
            candidates = []

        if not candidates:
            return RelevanceResult(relevant_records=[], context_summary=NO_RELEVANT_RECORDS)

        ranked = rank_records(candidates, tokenize_query(query), self.config.search_top_k)
        if not ranked:
            return RelevanceResult(relevant_records=[], context_summary=NO_RELEVANT_RECORDS)

        summary = "\n\n".join(
            f"[{self.clock.local(r.timestamp):%Y-%m-%d}] {r.text}" for r in ranked
        )
        logger.debug("Relevance search owner=%s query=%r → %d hits", owner_id, query, len(ranked))
        return RelevanceResult(relevant_records=ranked, context_summary=summary)
