"""
voice_context/supabase/record_store.py
--------------------------------------
Read access to raw voice recordings (the `voice_recordings` table).

The engine only depends on the RecordReader protocol; SupabaseRecordReader
is the production implementation. Owner scoping is trusted, not enforced.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from supabase import Client

from voice_context.models.domain.voice import RecordStatus, VoiceRecord
from voice_context.supabase.errors import VoiceStoreError

logger = logging.getLogger(__name__)

RECORDINGS_TABLE = "voice_recordings"
_COLUMNS = "id, user_id, transcription, created_at, duration_seconds, status"


class RecordReader(Protocol):
    def list_records(
        self,
        owner_id: UUID,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        status: Optional[RecordStatus] = RecordStatus.COMPLETED,
        require_text: bool = True,
        limit: Optional[int] = None,
        ascending: bool = True,
    ) -> List[VoiceRecord]:
        """Records with ``start <= created_at < end``, ordered by created_at."""
        ...


def row_to_record(row: Dict[str, Any]) -> VoiceRecord:
    return VoiceRecord(
        id=str(row["id"]),
        owner_id=row["user_id"],
        text=row.get("transcription"),
        created_at=row["created_at"],
        duration_seconds=row.get("duration_seconds") or 0,
        status=row.get("status") or RecordStatus.PENDING,
    )


class SupabaseRecordReader:
    def __init__(self, supabase: Client):
        self.sb = supabase

    def list_records(
        self,
        owner_id: UUID,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        status: Optional[RecordStatus] = RecordStatus.COMPLETED,
        require_text: bool = True,
        limit: Optional[int] = None,
        ascending: bool = True,
    ) -> List[VoiceRecord]:
        q = (
            self.sb.table(RECORDINGS_TABLE)
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
        )
        if start is not None:
            q = q.gte("created_at", start.isoformat())
        if end is not None:
            q = q.lt("created_at", end.isoformat())
        if status is not None:
            q = q.eq("status", status.value)
        if require_text:
            q = q.not_.is_("transcription", "null")
        q = q.order("created_at", desc=not ascending)
        if limit is not None:
            q = q.limit(limit)

        try:
            res = q.execute()
        except Exception as e:
            raise VoiceStoreError("list_records", e) from e

        records = [row_to_record(r) for r in (res.data or [])]
        if require_text:
            # empty-string transcriptions slip past the IS NOT NULL filter
            records = [r for r in records if r.text]
        logger.debug("list_records owner=%s → %d rows", owner_id, len(records))
        return records
