"""
voice_context/config.py
-----------------------
Tunables for the voice context engine, read from the environment (.env).

Import
------
    from voice_context.config import VoiceContextConfig

    cfg = VoiceContextConfig.from_env()
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import dotenv

dotenv.load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw else default


@dataclass
class VoiceContextConfig:
    timezone: str = "UTC"
    raw_char_budget: int = 500          # 2-day raw fallback truncation
    search_window_days: int = 30
    search_record_limit: int = 100
    search_top_k: int = 10
    max_workers: int = 4                # tier fan-out
    timeout_seconds: Optional[float] = None

    @classmethod
    def from_env(cls) -> "VoiceContextConfig":
        timeout = os.environ.get("VOICE_CONTEXT_TIMEOUT_SECONDS")
        return cls(
            timezone=os.environ.get("VOICE_CONTEXT_TIMEZONE", "UTC"),
            raw_char_budget=_env_int("VOICE_RAW_CHAR_BUDGET", 500),
            search_window_days=_env_int("VOICE_SEARCH_WINDOW_DAYS", 30),
            search_record_limit=_env_int("VOICE_SEARCH_RECORD_LIMIT", 100),
            search_top_k=_env_int("VOICE_SEARCH_TOP_K", 10),
            max_workers=_env_int("VOICE_CONTEXT_MAX_WORKERS", 4),
            timeout_seconds=float(timeout) if timeout else None,
        )
