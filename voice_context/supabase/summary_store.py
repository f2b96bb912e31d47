"""
voice_context/supabase/summary_store.py
---------------------------------------
Keyed read/upsert access to precomputed period summaries (`voice_summaries`).

Natural key: (user_id, period_type, period_start). The table carries a
UNIQUE constraint on it, so upsert is a single idempotent statement.
"""
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from supabase import Client

from voice_context.models.domain.voice import (
    PeriodSummaryRow,
    PeriodSummaryUpsert,
    PeriodType,
)
from voice_context.supabase.errors import VoiceStoreError

logger = logging.getLogger(__name__)

SUMMARIES_TABLE = "voice_summaries"
SUMMARY_CONFLICT_KEY = "user_id,period_type,period_start"


class SummaryStore(Protocol):
    def get_summary(
        self,
        owner_id: UUID,
        period_type: PeriodType,
        period_start: date,
    ) -> Optional[PeriodSummaryRow]:
        ...

    def list_summaries(
        self,
        owner_id: UUID,
        period_type: Optional[PeriodType] = None,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[PeriodSummaryRow]:
        """Summaries with ``start <= period_start <= end``, newest period first."""
        ...

    def upsert_summary(self, summary: PeriodSummaryUpsert, *, updated_at: datetime) -> None:
        ...


def _ensure_list(value: Any) -> List[Any]:
    """Array columns sometimes come back JSON-encoded — parse if needed."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return []
    return list(value) if value else []


def row_to_summary(row: Dict[str, Any]) -> PeriodSummaryRow:
    data: Dict[str, Any] = {
        "owner_id": row["user_id"],
        "period_type": row["period_type"],
        "period_start": row["period_start"],
        "period_end": row.get("period_end") or row["period_start"],
        "content": row.get("summary_content") or "",
        "key_topics": _ensure_list(row.get("key_topics")),
        "key_entities": _ensure_list(row.get("key_entities")),
        "sentiment": row.get("sentiment"),
        "source_record_ids": [str(i) for i in _ensure_list(row.get("voice_recording_ids"))],
        "record_count": row.get("recording_count") or 0,
        "total_duration_seconds": row.get("total_duration_seconds") or 0,
        "language": row.get("language") or "en",
        "model_used": row.get("model_used"),
        "id": row.get("id"),
    }
    for ts in ("created_at", "updated_at"):
        if row.get(ts):
            data[ts] = row[ts]
    return PeriodSummaryRow(**data)


def summary_to_row(summary: PeriodSummaryUpsert, updated_at: datetime) -> Dict[str, Any]:
    return {
        "user_id": str(summary.owner_id),
        "period_type": summary.period_type.value,
        "period_start": summary.period_start.isoformat(),
        "period_end": summary.period_end.isoformat(),
        "summary_content": summary.content,
        "key_topics": summary.key_topics,
        "key_entities": summary.key_entities,
        "sentiment": summary.sentiment,
        "voice_recording_ids": summary.source_record_ids,
        "recording_count": summary.record_count,
        "total_duration_seconds": summary.total_duration_seconds,
        "language": summary.language,
        "model_used": summary.model_used,
        "updated_at": updated_at.isoformat(),
    }


class SupabaseSummaryStore:
    def __init__(self, supabase: Client):
        self.sb = supabase

    def get_summary(
        self,
        owner_id: UUID,
        period_type: PeriodType,
        period_start: date,
    ) -> Optional[PeriodSummaryRow]:
        try:
            res = (
                self.sb.table(SUMMARIES_TABLE)
                .select("*")
                .eq("user_id", str(owner_id))
                .eq("period_type", period_type.value)
                .eq("period_start", period_start.isoformat())
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise VoiceStoreError("get_summary", e) from e
        rows = res.data or []
        return row_to_summary(rows[0]) if rows else None

    def list_summaries(
        self,
        owner_id: UUID,
        period_type: Optional[PeriodType] = None,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[PeriodSummaryRow]:
        q = self.sb.table(SUMMARIES_TABLE).select("*").eq("user_id", str(owner_id))
        if period_type is not None:
            q = q.eq("period_type", period_type.value)
        if start is not None:
            q = q.gte("period_start", start.isoformat())
        if end is not None:
            q = q.lte("period_start", end.isoformat())
        try:
            res = q.order("period_start", desc=True).execute()
        except Exception as e:
            raise VoiceStoreError("list_summaries", e) from e
        return [row_to_summary(r) for r in (res.data or [])]

    def upsert_summary(self, summary: PeriodSummaryUpsert, *, updated_at: datetime) -> None:
        try:
            (
                self.sb.table(SUMMARIES_TABLE)
                .upsert(summary_to_row(summary, updated_at), on_conflict=SUMMARY_CONFLICT_KEY)
                .execute()
            )
        except Exception as e:
            raise VoiceStoreError("upsert_summary", e) from e
        logger.debug(
            "Upserted %s summary owner=%s start=%s",
            summary.period_type.value, summary.owner_id, summary.period_start,
        )
