"""
voice_context/services/summary_service.py
-----------------------------------------
Write side of the period-summary cache.

  - save_summary      — idempotent upsert keyed on (owner, period_type, period_start)
  - check_staleness   — is yesterday's daily summary missing?

Neither method generates summaries. A missing summary is reported so an
external scheduler can enqueue the generation job.
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from voice_context.config import VoiceContextConfig
from voice_context.models.domain.voice import (
    PeriodSummaryUpsert,
    PeriodType,
    StalenessReport,
    SummaryWriteResult,
)
from voice_context.services.clock import Clock
from voice_context.supabase.summary_store import SummaryStore

logger = logging.getLogger(__name__)


class SummaryService:
    def __init__(
        self,
        summaries: SummaryStore,
        *,
        clock: Optional[Clock] = None,
        config: Optional[VoiceContextConfig] = None,
    ):
        self.summaries = summaries
        self.config = config or VoiceContextConfig()
        self.clock = clock or Clock(self.config.timezone)

    def save_summary(self, summary: PeriodSummaryUpsert) -> SummaryWriteResult:
        """
        Upsert a computed summary. All fields are replaced, updated_at is
        refreshed. Failures come back in the result so batch callers can
        move on to the next owner.
        """
        try:
            self.summaries.upsert_summary(summary, updated_at=self.clock.now())
        except Exception as e:
            logger.error(
                "Saving %s summary failed owner=%s start=%s: %s",
                summary.period_type.value, summary.owner_id, summary.period_start, e,
            )
            return SummaryWriteResult(success=False, error=str(e))
        return SummaryWriteResult(success=True)

    def check_staleness(self, owner_id: UUID) -> StalenessReport:
        yesterday = self.clock.days_ago(1)
        try:
            existing = self.summaries.get_summary(owner_id, PeriodType.DAILY, yesterday)
        except Exception as e:
            logger.warning("Staleness check failed for owner=%s: %s", owner_id, e)
            return StalenessReport(
                owner_id=owner_id,
                period_start=yesterday,
                missing=False,
                error=str(e),
            )

        if existing is None:
            logger.info(
                "Need to generate daily summary for owner=%s date=%s",
                owner_id, yesterday.isoformat(),
            )
        return StalenessReport(
            owner_id=owner_id,
            period_start=yesterday,
            missing=existing is None,
        )
