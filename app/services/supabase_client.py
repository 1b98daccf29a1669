"""Shared service-role Supabase client."""

import httpx
from supabase import Client, create_client
from supabase.client import ClientOptions

from app.core.config import settings

_client: Client | None = None


def supabase_configured() -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY)


def _client_options() -> ClientOptions:
    # The shared httpx client is what bounds auth (GoTrue) calls; the
    # per-service timeouts below only reach PostgREST and storage.
    timeout = settings.SUPABASE_TIMEOUT_SECONDS
    return ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        httpx_client=httpx.Client(timeout=timeout),
        postgrest_client_timeout=timeout,
        storage_client_timeout=timeout,
    )


def get_supabase() -> Client:
    """Return the process-wide service-role client, creating it on first use."""
    global _client
    if _client is None:
        _client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=_client_options(),
        )
    return _client
