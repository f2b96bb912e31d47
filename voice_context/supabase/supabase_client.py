"""
Process-wide Supabase client.

Created once on first use and held for the process lifetime. Services never
call this themselves; routers and workflows resolve it and inject it.
"""
from __future__ import annotations

import os
from functools import lru_cache

import dotenv
from supabase import Client, create_client

dotenv.load_dotenv()

# The web app's env names are accepted as fallbacks so one .env serves both.
_URL_VARS = ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
_KEY_VARS = ("SUPABASE_SERVICE_KEY", "SUPABASE_SERVICE_ROLE_KEY")


def _first_env(names: tuple) -> str:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return ""


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    url = _first_env(_URL_VARS)
    key = _first_env(_KEY_VARS)
    if not url or not key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in .env")
    return create_client(url, key)
