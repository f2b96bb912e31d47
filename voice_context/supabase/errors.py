"""Errors raised by the Supabase-backed voice stores."""
from __future__ import annotations


class VoiceStoreError(RuntimeError):
    """A read or write against the voice tables failed."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
