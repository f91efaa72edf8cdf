"""
Supabase client singleton.

Products, lookup tables, price bands and vendors all live in Supabase; the
catalog repository and the detailed health check share one client.
"""

from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from config.settings import get_settings


class SupabaseClientError(Exception):
    """Raised when the Supabase client cannot be created."""
    pass


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Shared Supabase client, created on first use.

    Raises:
        SupabaseClientError: If the URL/key are blank or the client cannot
            be created
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise SupabaseClientError("SUPABASE_URL and SUPABASE_KEY must be set")
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        raise SupabaseClientError(f"Failed to create Supabase client: {e}") from e


def get_supabase_client_optional() -> Optional[Client]:
    """The shared client, or None when Supabase is not usable (health probes)."""
    try:
        return get_supabase_client()
    except SupabaseClientError:
        return None
