"""Tests for summary persistence and staleness detection."""
from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from tests.fakes import NOW, InMemoryRecordReader, InMemorySummaryStore
from voice_context.config import VoiceContextConfig
from voice_context.models.domain.voice import PeriodSummaryUpsert, PeriodType
from voice_context.services.summary_service import SummaryService
from voice_context.services.voice_context_service import VoiceContextService


@pytest.fixture
def weekly_payload(owner_id) -> PeriodSummaryUpsert:
    return PeriodSummaryUpsert(
        owner_id=owner_id,
        period_type=PeriodType.WEEKLY,
        period_start=date(2026, 10, 12),
        period_end=date(2026, 10, 18),
        content="First draft.",
        key_topics=["work"],
        key_entities=["Ana"],
        sentiment="positive",
        source_record_ids=["r1", "r2"],
        record_count=2,
        total_duration_seconds=95,
        language="en",
        model_used="gpt-4o-mini",
    )


class TestSaveSummary:
    def test_second_write_replaces_first(self, summaries, summary_service, weekly_payload) -> None:
        first = summary_service.save_summary(weekly_payload)
        second = summary_service.save_summary(
            weekly_payload.model_copy(update={"content": "Final.", "key_topics": [], "sentiment": None})
        )

        assert first.success and second.success
        assert len(summaries.rows) == 1
        row = summaries.rows[weekly_payload.key]
        assert row.content == "Final."
        assert row.key_topics == []
        assert row.sentiment is None
        assert row.source_record_ids == ["r1", "r2"]

    def test_updated_at_comes_from_clock(self, summaries, summary_service, weekly_payload) -> None:
        summary_service.save_summary(weekly_payload)
        assert summaries.rows[weekly_payload.key].updated_at == NOW

    def test_different_period_start_is_a_new_row(self, summaries, summary_service, weekly_payload) -> None:
        summary_service.save_summary(weekly_payload)
        summary_service.save_summary(weekly_payload.model_copy(update={"period_start": date(2026, 10, 5)}))
        assert len(summaries.rows) == 2

    def test_write_failure_is_returned_not_raised(self, clock, weekly_payload) -> None:
        svc = SummaryService(InMemorySummaryStore(fail_writes=True), clock=clock)

        result = svc.save_summary(weekly_payload)

        assert result.success is False
        assert "row-level security violation" in result.error


class TestCheckStaleness:
    def test_missing_yesterday_is_reported(self, owner_id, summary_service) -> None:
        report = summary_service.check_staleness(owner_id)

        assert report.missing is True
        assert report.period_type == PeriodType.DAILY
        assert report.missing_period_start == date(2026, 10, 18)
        assert report.error is None

    def test_present_summary_is_not_stale(self, owner_id, summaries, summary_service) -> None:
        summaries.add(owner_id, PeriodType.DAILY, date(2026, 10, 18), "done")

        report = summary_service.check_staleness(owner_id)

        assert report.missing is False
        assert report.missing_period_start is None

    def test_weekly_summary_does_not_count(self, owner_id, summaries, summary_service) -> None:
        summaries.add(owner_id, PeriodType.WEEKLY, date(2026, 10, 18), "wrong type")
        assert summary_service.check_staleness(owner_id).missing is True

    def test_never_writes(self, owner_id, summaries, summary_service) -> None:
        summary_service.check_staleness(owner_id)
        assert summaries.rows == {}

    def test_read_failure_is_unknown_not_missing(self, owner_id, clock) -> None:
        svc = SummaryService(InMemorySummaryStore(fail_reads=True), clock=clock)

        report = svc.check_staleness(owner_id)

        assert report.missing is False
        assert report.missing_period_start is None
        assert "read timed out" in report.error

    def test_default_clock_uses_configured_timezone(self, summaries) -> None:
        cfg = VoiceContextConfig(timezone="Pacific/Kiritimati")

        svc = SummaryService(summaries, config=cfg)

        assert svc.clock.tz == ZoneInfo("Pacific/Kiritimati")
        assert svc.clock.tz == VoiceContextService(InMemoryRecordReader(), summaries, config=cfg).clock.tz
