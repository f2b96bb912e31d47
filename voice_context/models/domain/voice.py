"""Domain models for voice records, period summaries and the tiered voice context."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ._time import utcnow

NO_VOICE_CONTEXT = "No voice recordings found."
NO_RELEVANT_RECORDS = "No relevant voice recordings found."


class RecordStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PeriodType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# ── Stored rows ──────────────────────────────────────────────────────────────

class VoiceRecord(BaseModel):
    """One transcribed voice note. Written by the ingestion pipeline, read-only here."""

    id: str
    owner_id: UUID
    text: Optional[str] = None
    created_at: datetime
    duration_seconds: float = Field(default=0, ge=0)
    status: RecordStatus = RecordStatus.PENDING

    @property
    def is_eligible(self) -> bool:
        return self.status == RecordStatus.COMPLETED and bool(self.text)


class PeriodSummaryUpsert(BaseModel):
    """
    Upsert intent for a period summary.

    Natural key: (owner_id, period_type, period_start)
    Writing an existing key replaces every field (last writer wins).
    """

    owner_id: UUID
    period_type: PeriodType
    period_start: date
    period_end: date

    content: str
    key_topics: List[str] = Field(default_factory=list)
    key_entities: List[str] = Field(default_factory=list)
    sentiment: Optional[str] = None

    source_record_ids: List[str] = Field(default_factory=list)
    record_count: int = Field(default=0, ge=0)
    total_duration_seconds: int = Field(default=0, ge=0)

    language: str = "en"
    model_used: Optional[str] = None

    @property
    def key(self) -> tuple:
        return (self.owner_id, self.period_type, self.period_start)


class PeriodSummaryRow(PeriodSummaryUpsert):
    """Full database row returned after insert/select."""

    id: Optional[UUID] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# ── Tier outputs (ephemeral) ─────────────────────────────────────────────────

class PeriodContext(BaseModel):
    summary: Optional[str] = None
    key_topics: List[str] = Field(default_factory=list)
    key_entities: List[str] = Field(default_factory=list)
    record_count: int = 0
    available: bool = False

    @classmethod
    def unavailable(cls) -> "PeriodContext":
        return cls()


class TodayRecording(BaseModel):
    id: str
    text: str
    timestamp: datetime
    duration_seconds: float = 0


class TodayContext(BaseModel):
    recordings: List[TodayRecording] = Field(default_factory=list)
    total_records: int = 0
    total_duration_seconds: float = 0
    full_text: str = ""

    @classmethod
    def empty(cls) -> "TodayContext":
        return cls()


class VoiceContext(BaseModel):
    """Everything an agent needs about an owner's voice history, by tier."""

    today: TodayContext
    past_two_days: PeriodContext
    past_week: PeriodContext
    past_month: PeriodContext
    combined_context: str


# ── Search / persistence / staleness results ─────────────────────────────────

class RelevantRecording(BaseModel):
    id: str
    text: str
    timestamp: datetime
    relevance_score: float


class RelevanceResult(BaseModel):
    relevant_records: List[RelevantRecording] = Field(default_factory=list)
    context_summary: str = NO_RELEVANT_RECORDS


class SummaryWriteResult(BaseModel):
    success: bool
    error: Optional[str] = None


class StalenessReport(BaseModel):
    owner_id: UUID
    period_type: PeriodType = PeriodType.DAILY
    period_start: date
    missing: bool
    error: Optional[str] = None

    @property
    def missing_period_start(self) -> Optional[date]:
        return self.period_start if self.missing else None


class VoiceContextStats(BaseModel):
    total_records: int = 0
    total_duration_seconds: float = 0
    oldest_record: Optional[datetime] = None
    newest_record: Optional[datetime] = None
    summaries_available: Dict[PeriodType, int] = Field(
        default_factory=lambda: {p: 0 for p in PeriodType}
    )
