"""Tests for the period tier fallback chain."""
from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from tests.fakes import InMemoryRecordReader, InMemorySummaryStore, at
from voice_context.models.domain.voice import PeriodType
from voice_context.services.period_resolver import (
    PAST_MONTH,
    PAST_TWO_DAYS,
    PAST_WEEK,
    PeriodContextResolver,
    TierWindow,
    truncate,
    union_preserving_order,
)


def make_resolver(spec, summaries, records, clock, budget: int = 500) -> PeriodContextResolver:
    return PeriodContextResolver(spec, summaries, records, clock, raw_char_budget=budget)


class TestTierWindow:
    def test_week_window_bounds(self, clock) -> None:
        window = TierWindow.ending_today(clock, 7)
        assert window.start == date(2026, 10, 12)
        assert window.end == date(2026, 10, 18)
        assert window.start_at == at(12, 0)
        assert window.end_at == at(19, 0)


class TestHelpers:
    def test_union_is_case_sensitive_and_ordered(self) -> None:
        assert union_preserving_order([["Meeting", "gym"], ["meeting", "gym", "Ana"]]) == [
            "Meeting", "gym", "meeting", "Ana",
        ]

    def test_truncate_leaves_text_at_budget_alone(self) -> None:
        assert truncate("x" * 500, 500) == "x" * 500
        assert truncate("x" * 501, 500) == "x" * 500 + "..."


class TestChainShape:
    def test_two_day_tier_has_no_exact_step_but_allows_raw(self, summaries, records, clock) -> None:
        steps = make_resolver(PAST_TWO_DAYS, summaries, records, clock).steps()
        assert [s.__name__ for s in steps] == ["_try_finer_grain", "_try_raw"]

    @pytest.mark.parametrize("spec", [PAST_WEEK, PAST_MONTH])
    def test_week_and_month_stop_before_raw(self, spec, summaries, records, clock) -> None:
        steps = make_resolver(spec, summaries, records, clock).steps()
        assert [s.__name__ for s in steps] == ["_try_exact", "_try_finer_grain"]


class TestExactSummary:
    def test_weekly_summary_returned_verbatim(self, owner_id, summaries, records, clock) -> None:
        summaries.add(
            owner_id, PeriodType.WEEKLY, date(2026, 10, 12), "Busy week of planning.",
            key_topics=["work", "work", "travel"], key_entities=["Ana"], record_count=9,
        )
        ctx = make_resolver(PAST_WEEK, summaries, records, clock).resolve(owner_id)

        assert ctx.available is True
        assert ctx.summary == "Busy week of planning."
        assert ctx.key_topics == ["work", "travel"]
        assert ctx.key_entities == ["Ana"]
        assert ctx.record_count == 9

    def test_exact_hit_skips_finer_grain_and_raw_reads(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.WEEKLY, date(2026, 10, 12), "weekly")
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 15), "daily")
        summary_spy = MagicMock(wraps=summaries)
        record_spy = MagicMock(wraps=records)

        ctx = make_resolver(PAST_WEEK, summary_spy, record_spy, clock).resolve(owner_id)

        assert ctx.summary == "weekly"
        summary_spy.get_summary.assert_called_once_with(owner_id, PeriodType.WEEKLY, date(2026, 10, 12))
        summary_spy.list_summaries.assert_not_called()
        record_spy.list_records.assert_not_called()

    def test_monthly_summary_keyed_on_window_start(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.MONTHLY, date(2026, 9, 19), "A month of recovery.")
        ctx = make_resolver(PAST_MONTH, summaries, records, clock).resolve(owner_id)
        assert ctx.summary == "A month of recovery."


class TestFinerGrain:
    def test_week_combines_daily_summaries_newest_first(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 14), "Dentist.",
                      key_topics=["health"], key_entities=["Dr. Lee"], record_count=2)
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 17), "Groceries.",
                      key_topics=["errands", "health"], record_count=3)

        ctx = make_resolver(PAST_WEEK, summaries, records, clock).resolve(owner_id)

        assert ctx.available is True
        assert ctx.summary == "**2026-10-17**: Groceries.\n\n**2026-10-14**: Dentist."
        assert ctx.key_topics == ["errands", "health"]
        assert ctx.key_entities == ["Dr. Lee"]
        assert ctx.record_count == 5

    def test_daily_summaries_outside_window_ignored(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 11), "too old")
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 19), "today, not yet closed")
        ctx = make_resolver(PAST_WEEK, summaries, records, clock).resolve(owner_id)
        assert ctx.available is False

    def test_month_combines_weekly_summaries(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.WEEKLY, date(2026, 9, 28), "Week A")
        summaries.add(owner_id, PeriodType.WEEKLY, date(2026, 10, 5), "Week B")

        ctx = make_resolver(PAST_MONTH, summaries, records, clock).resolve(owner_id)

        assert ctx.summary == "**Week of 2026-10-05**: Week B\n\n**Week of 2026-09-28**: Week A"

    def test_two_days_prefers_daily_summaries_over_raw(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 18), "Yesterday's digest")
        records.add(owner_id, "raw note", at(18, 10))

        ctx = make_resolver(PAST_TWO_DAYS, summaries, records, clock).resolve(owner_id)

        assert ctx.summary == "## 2026-10-18\nYesterday's digest"
        assert records.calls == []

    def test_topics_are_not_normalised(self, owner_id, summaries, records, clock) -> None:
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 16), "a", key_topics=["Meeting"])
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 17), "b", key_topics=["meeting"])
        ctx = make_resolver(PAST_WEEK, summaries, records, clock).resolve(owner_id)
        assert ctx.key_topics == ["meeting", "Meeting"]


class TestRawFallback:
    def _seed_long_notes(self, records, owner_id) -> None:
        records.add(owner_id, "a" * 300, at(17, 9))
        records.add(owner_id, "b" * 300, at(18, 20))

    def test_week_never_falls_back_to_raw(self, owner_id, summaries, records, clock) -> None:
        self._seed_long_notes(records, owner_id)
        ctx = make_resolver(PAST_WEEK, summaries, records, clock).resolve(owner_id)
        assert ctx.available is False
        assert ctx.summary is None
        assert ctx.record_count == 0

    def test_two_days_truncates_raw_text(self, owner_id, summaries, records, clock) -> None:
        self._seed_long_notes(records, owner_id)
        ctx = make_resolver(PAST_TWO_DAYS, summaries, records, clock).resolve(owner_id)

        assert ctx.available is True
        assert ctx.record_count == 2
        assert ctx.summary == ("a" * 300 + "\n\n" + "b" * 198) + "..."
        assert ctx.key_topics == []
        assert ctx.key_entities == []

    def test_raw_window_excludes_today_and_older_days(self, owner_id, summaries, records, clock) -> None:
        records.add(owner_id, "three days ago", at(16, 23, 59))
        records.add(owner_id, "in window", at(17, 0, 0))
        records.add(owner_id, "today", at(19, 8))

        ctx = make_resolver(PAST_TWO_DAYS, summaries, records, clock).resolve(owner_id)

        assert ctx.summary == "in window"
        assert ctx.record_count == 1

    def test_raw_text_in_ascending_order(self, owner_id, summaries, records, clock) -> None:
        records.add(owner_id, "second", at(18, 9))
        records.add(owner_id, "first", at(17, 9))
        ctx = make_resolver(PAST_TWO_DAYS, summaries, records, clock).resolve(owner_id)
        assert ctx.summary == "first\n\nsecond"

    def test_budget_is_configurable(self, owner_id, summaries, records, clock) -> None:
        records.add(owner_id, "hello world", at(18, 9))
        ctx = make_resolver(PAST_TWO_DAYS, summaries, records, clock, budget=5).resolve(owner_id)
        assert ctx.summary == "hello..."


class TestFailures:
    def test_summary_store_failure_is_unavailable(self, owner_id, records, clock) -> None:
        broken = InMemorySummaryStore(fail_reads=True)
        ctx = make_resolver(PAST_WEEK, broken, records, clock).resolve(owner_id)
        assert ctx.available is False

    def test_record_reader_failure_is_unavailable(self, owner_id, summaries, clock) -> None:
        ctx = make_resolver(PAST_TWO_DAYS, summaries, InMemoryRecordReader(fail=True), clock).resolve(owner_id)
        assert ctx.available is False

    def test_no_data_is_unavailable(self, owner_id, summaries, records, clock) -> None:
        ctx = make_resolver(PAST_MONTH, summaries, records, clock).resolve(owner_id)
        assert ctx.model_dump() == {
            "summary": None,
            "key_topics": [],
            "key_entities": [],
            "record_count": 0,
            "available": False,
        }
