"""
voice_context/services/period_resolver.py
-----------------------------------------
Resolves one historical tier (past 2 days / week / month) into a
PeriodContext by walking an ordered fallback chain:

    exact summary → finer-grain summaries → raw records (2-day only) → unavailable

Each step returns a PeriodContext or None ("no data, try next"). Raw text
is only allowed where the window is small enough to stay inside a prompt;
the week and month tiers report available=False instead, which tells the
caller that the summary job has not run yet.

Import
------
    from voice_context.services.period_resolver import (
        PAST_TWO_DAYS, PAST_WEEK, PAST_MONTH, PeriodContextResolver,
    )
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional
from uuid import UUID

from voice_context.models.domain.voice import PeriodContext, PeriodSummaryRow, PeriodType
from voice_context.services.clock import Clock
from voice_context.supabase.record_store import RecordReader
from voice_context.supabase.summary_store import SummaryStore

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."


# ─────────────────────────────────────────────────────────────────────────────
# Tier definitions
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TierSpec:
    name: str
    window_days: int
    finer_type: PeriodType
    finer_heading: str                       # formatted with date=, content=
    target_type: Optional[PeriodType] = None  # None → no exact-summary step
    allow_raw: bool = False


PAST_TWO_DAYS = TierSpec(
    name="past_two_days",
    window_days=2,
    finer_type=PeriodType.DAILY,
    finer_heading="## {date}\n{content}",
    allow_raw=True,
)

PAST_WEEK = TierSpec(
    name="past_week",
    window_days=7,
    target_type=PeriodType.WEEKLY,
    finer_type=PeriodType.DAILY,
    finer_heading="**{date}**: {content}",
)

PAST_MONTH = TierSpec(
    name="past_month",
    window_days=30,
    target_type=PeriodType.MONTHLY,
    finer_type=PeriodType.WEEKLY,
    finer_heading="**Week of {date}**: {content}",
)


@dataclass(frozen=True)
class TierWindow:
    start: date           # first day covered (inclusive)
    end: date             # last day covered, inclusive (yesterday)
    start_at: datetime    # raw-record bounds: start_at <= created_at < end_at
    end_at: datetime

    @classmethod
    def ending_today(cls, clock: Clock, days: int) -> "TierWindow":
        today = clock.today()
        start = today - timedelta(days=days)
        return cls(
            start=start,
            end=today - timedelta(days=1),
            start_at=datetime.combine(start, time.min, tzinfo=clock.tz),
            end_at=clock.start_of_today(),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def union_preserving_order(groups: Iterable[Iterable[str]]) -> List[str]:
    """Case-sensitive set union that keeps first-seen order."""
    return list(dict.fromkeys(item for group in groups for item in group))


def truncate(text: str, budget: int) -> str:
    if len(text) <= budget:
        return text
    return text[:budget] + TRUNCATION_MARKER


# ─────────────────────────────────────────────────────────────────────────────
# Resolver
# ─────────────────────────────────────────────────────────────────────────────

Step = Callable[[UUID, TierWindow], Optional[PeriodContext]]


class PeriodContextResolver:
    """
    One instance per tier.

    Usage
    -----
        resolver = PeriodContextResolver(PAST_WEEK, summaries, records, clock)
        ctx = resolver.resolve(owner_id)   # never raises
    """

    def __init__(
        self,
        spec: TierSpec,
        summaries: SummaryStore,
        records: RecordReader,
        clock: Clock,
        *,
        raw_char_budget: int = 500,
    ):
        self.spec = spec
        self.summaries = summaries
        self.records = records
        self.clock = clock
        self.raw_char_budget = raw_char_budget

    def steps(self) -> List[Step]:
        chain: List[Step] = []
        if self.spec.target_type is not None:
            chain.append(self._try_exact)
        chain.append(self._try_finer_grain)
        if self.spec.allow_raw:
            chain.append(self._try_raw)
        return chain

    def resolve(self, owner_id: UUID) -> PeriodContext:
        window = TierWindow.ending_today(self.clock, self.spec.window_days)
        try:
            for step in self.steps():
                ctx = step(owner_id, window)
                if ctx is not None:
                    return ctx
        except Exception:
            logger.exception("%s context failed for owner=%s", self.spec.name, owner_id)
        return PeriodContext.unavailable()

    # ── Steps ─────────────────────────────────────────────────────────────────

    def _try_exact(self, owner_id: UUID, window: TierWindow) -> Optional[PeriodContext]:
        row = self.summaries.get_summary(owner_id, self.spec.target_type, window.start)
        if row is None:
            return None
        return PeriodContext(
            summary=row.content,
            key_topics=union_preserving_order([row.key_topics]),
            key_entities=union_preserving_order([row.key_entities]),
            record_count=row.record_count,
            available=True,
        )

    def _try_finer_grain(self, owner_id: UUID, window: TierWindow) -> Optional[PeriodContext]:
        rows = self.summaries.list_summaries(
            owner_id,
            self.spec.finer_type,
            start=window.start,
            end=window.end,
        )
        if not rows:
            return None
        rows = sorted(rows, key=lambda r: r.period_start, reverse=True)
        return PeriodContext(
            summary="\n\n".join(self._heading(r) for r in rows),
            key_topics=union_preserving_order(r.key_topics for r in rows),
            key_entities=union_preserving_order(r.key_entities for r in rows),
            record_count=sum(r.record_count for r in rows),
            available=True,
        )

    def _try_raw(self, owner_id: UUID, window: TierWindow) -> Optional[PeriodContext]:
        records = self.records.list_records(
            owner_id,
            start=window.start_at,
            end=window.end_at,
            ascending=True,
        )
        records = [r for r in records if r.is_eligible]
        if not records:
            return None
        combined = "\n\n".join(r.text for r in records)
        return PeriodContext(
            summary=truncate(combined, self.raw_char_budget),
            record_count=len(records),
            available=True,
        )

    def _heading(self, row: PeriodSummaryRow) -> str:
        return self.spec.finer_heading.format(
            date=row.period_start.isoformat(),
            content=row.content,
        )
