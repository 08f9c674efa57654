"""Supabase client helpers – WinMix reads the public 'matches' table."""

from __future__ import annotations

from supabase import Client, create_client

from winmix.config import get_settings

_client: Client | None = None


def get_client() -> Client:
    """Return a singleton Supabase client built from settings."""
    global _client
    if _client is None:
        s = get_settings()
        if not s.supabase_url or not s.supabase_key:
            raise RuntimeError("WINMIX_SUPABASE_URL and WINMIX_SUPABASE_KEY must be set")
        _client = create_client(s.supabase_url, s.supabase_key)
    return _client
