"""
voice_context/services/voice_context_service.py
-----------------------------------------------
Tiered voice memory for AI agents.

Memory tiers
------------
  - Today:        full transcriptions with [HH:MM] timestamps
  - Past 2 days:  daily summaries, or truncated raw text as a last resort
  - Past week:    weekly summary, or the daily summaries inside the week
  - Past month:   monthly summary, or the weekly summaries inside the month

get_combined_context() is the entry point agents should use: it runs the
four tiers concurrently and compiles one labelled text blob. Every tier
swallows its own store failures, so a slow or broken read degrades one
section instead of the whole context.

Import
------
    from voice_context.services.voice_context_service import VoiceContextService

    svc = VoiceContextService(records, summaries)
    ctx = svc.get_combined_context(owner_id)
    prompt = ctx.combined_context
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import List, Optional
from uuid import UUID

from voice_context.config import VoiceContextConfig
from voice_context.models.domain.voice import (
    NO_VOICE_CONTEXT,
    PeriodContext,
    PeriodType,
    RecordStatus,
    TodayContext,
    TodayRecording,
    VoiceContext,
    VoiceContextStats,
)
from voice_context.services.clock import Clock
from voice_context.services.period_resolver import (
    PAST_MONTH,
    PAST_TWO_DAYS,
    PAST_WEEK,
    PeriodContextResolver,
    TierSpec,
)
from voice_context.supabase.record_store import RecordReader
from voice_context.supabase.summary_store import SummaryStore

logger = logging.getLogger(__name__)

SECTION_DELIMITER = "\n\n---\n\n"


def compile_combined_context(
    today: TodayContext,
    past_two_days: PeriodContext,
    past_week: PeriodContext,
    past_month: PeriodContext,
) -> str:
    """Fixed section order, independent of which tier finished first."""
    sections: List[str] = []

    if today.total_records > 0:
        sections.append(
            f"## TODAY'S VOICE NOTES ({today.total_records} recordings)\n{today.full_text}"
        )

    if past_two_days.available:
        sections.append(f"## PAST 2 DAYS SUMMARY\n{past_two_days.summary or ''}")

    if past_week.available:
        topics = f"\nKey Topics: {', '.join(past_week.key_topics)}" if past_week.key_topics else ""
        sections.append(f"## PAST WEEK SUMMARY{topics}\n{past_week.summary or ''}")

    if past_month.available:
        themes = f"\nKey Themes: {', '.join(past_month.key_topics)}" if past_month.key_topics else ""
        sections.append(f"## PAST MONTH THEMES{themes}\n{past_month.summary or ''}")

    return SECTION_DELIMITER.join(sections) if sections else NO_VOICE_CONTEXT


class VoiceContextService:
    """Builds the tiered voice context for one owner at a time."""

    def __init__(
        self,
        records: RecordReader,
        summaries: SummaryStore,
        *,
        clock: Optional[Clock] = None,
        config: Optional[VoiceContextConfig] = None,
    ):
        self.records = records
        self.summaries = summaries
        self.config = config or VoiceContextConfig()
        self.clock = clock or Clock(self.config.timezone)

    def _resolver(self, spec: TierSpec) -> PeriodContextResolver:
        return PeriodContextResolver(
            spec,
            self.summaries,
            self.records,
            self.clock,
            raw_char_budget=self.config.raw_char_budget,
        )

    # ── Today ─────────────────────────────────────────────────────────────────

    def get_today_context(self, owner_id: UUID) -> TodayContext:
        """All of today's completed recordings, oldest first. Never raises."""
        try:
            records = self.records.list_records(
                owner_id,
                start=self.clock.start_of_today(),
                ascending=True,
            )
        except Exception as e:
            logger.warning("Today's recordings unavailable for owner=%s: %s", owner_id, e)
            return TodayContext.empty()

        recordings = [
            TodayRecording(
                id=r.id,
                text=r.text,
                timestamp=r.created_at,
                duration_seconds=r.duration_seconds,
            )
            for r in sorted(records, key=lambda r: r.created_at)
            if r.is_eligible
        ]

        full_text = "\n\n".join(
            f"[{self.clock.local(r.timestamp):%H:%M}] {r.text}" for r in recordings
        )

        return TodayContext(
            recordings=recordings,
            total_records=len(recordings),
            total_duration_seconds=sum(r.duration_seconds for r in recordings),
            full_text=full_text,
        )

    # ── Historical tiers ──────────────────────────────────────────────────────

    def get_past_two_days_context(self, owner_id: UUID) -> PeriodContext:
        return self._resolver(PAST_TWO_DAYS).resolve(owner_id)

    def get_week_context(self, owner_id: UUID) -> PeriodContext:
        return self._resolver(PAST_WEEK).resolve(owner_id)

    def get_month_context(self, owner_id: UUID) -> PeriodContext:
        return self._resolver(PAST_MONTH).resolve(owner_id)

    # ── Combined ──────────────────────────────────────────────────────────────

    def get_combined_context(self, owner_id: UUID) -> VoiceContext:
        """
        Fan out the four tiers, wait for all of them, then compile.

        Raises concurrent.futures.TimeoutError only when config.timeout_seconds
        is set and the fan-out as a whole overruns it. The deadline is shared
        by all four tiers, and the caller is not held back by tiers still
        running when it expires.
        """
        timeout = self.config.timeout_seconds
        deadline = None if timeout is None else time.monotonic() + timeout

        def remaining() -> Optional[float]:
            if deadline is None:
                return None
            return max(0.0, deadline - time.monotonic())

        pool = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="voice-context",
        )
        try:
            today_f = pool.submit(self.get_today_context, owner_id)
            two_days_f = pool.submit(self.get_past_two_days_context, owner_id)
            week_f = pool.submit(self.get_week_context, owner_id)
            month_f = pool.submit(self.get_month_context, owner_id)

            today = today_f.result(timeout=remaining())
            past_two_days = two_days_f.result(timeout=remaining())
            past_week = week_f.result(timeout=remaining())
            past_month = month_f.result(timeout=remaining())
        except FuturesTimeout:
            logger.warning("Voice context for owner=%s timed out after %ss", owner_id, timeout)
            raise
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        combined = compile_combined_context(today, past_two_days, past_week, past_month)
        logger.info(
            "Voice context for owner=%s: today=%d two_days=%s week=%s month=%s",
            owner_id,
            today.total_records,
            past_two_days.available,
            past_week.available,
            past_month.available,
        )

        return VoiceContext(
            today=today,
            past_two_days=past_two_days,
            past_week=past_week,
            past_month=past_month,
            combined_context=combined,
        )

    # ── Stats ─────────────────────────────────────────────────────────────────

    def get_stats(self, owner_id: UUID) -> VoiceContextStats:
        """Record totals and stored-summary counts. Store errors propagate."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="voice-stats") as pool:
            records_f = pool.submit(
                self.records.list_records,
                owner_id,
                status=RecordStatus.COMPLETED,
                require_text=False,
                ascending=True,
            )
            summaries_f = pool.submit(self.summaries.list_summaries, owner_id)
            records = records_f.result()
            summaries = summaries_f.result()

        counts = {p: 0 for p in PeriodType}
        for s in summaries:
            counts[s.period_type] += 1

        return VoiceContextStats(
            total_records=len(records),
            total_duration_seconds=sum(r.duration_seconds for r in records),
            oldest_record=records[0].created_at if records else None,
            newest_record=records[-1].created_at if records else None,
            summaries_available=counts,
        )
