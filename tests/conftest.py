from __future__ import annotations

from uuid import UUID

import pytest

from tests.fakes import NOW, InMemoryRecordReader, InMemorySummaryStore
from voice_context.config import VoiceContextConfig
from voice_context.services.clock import Clock
from voice_context.services.relevance_service import RelevanceService
from voice_context.services.summary_service import SummaryService
from voice_context.services.voice_context_service import VoiceContextService


@pytest.fixture
def owner_id() -> UUID:
    return UUID("6f1c2a9e-3b7d-4c55-9a10-2d8e4f6b7c01")


@pytest.fixture
def clock() -> Clock:
    return Clock.fixed(NOW)


@pytest.fixture
def config() -> VoiceContextConfig:
    return VoiceContextConfig()


@pytest.fixture
def records() -> InMemoryRecordReader:
    return InMemoryRecordReader()


@pytest.fixture
def summaries() -> InMemorySummaryStore:
    return InMemorySummaryStore()


@pytest.fixture
def voice_service(records, summaries, clock, config) -> VoiceContextService:
    return VoiceContextService(records, summaries, clock=clock, config=config)


@pytest.fixture
def relevance_service(records, clock, config) -> RelevanceService:
    return RelevanceService(records, clock=clock, config=config)


@pytest.fixture
def summary_service(summaries, clock) -> SummaryService:
    return SummaryService(summaries, clock=clock)
