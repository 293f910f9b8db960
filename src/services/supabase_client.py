"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.errors import SupabaseError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

NO_ROWS_CODE = "PGRST116"


def create_supabase_client(access_token: Optional[str] = None) -> Client:
    """
    Create a Supabase client for one request.

    With ``access_token`` the PostgREST calls run as that user, so the
    row-level ownership policies on `properties`, `property_images`,
    `profiles` and `social_media` apply.
    """
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_ANON_KEY")

    if not url or not key:
        raise SupabaseError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    # Serverless: no background token refresh, nothing persisted
    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )

    client = create_client(url, key, options)
    if access_token:
        client.postgrest.auth(access_token)
    return client


def is_no_rows_error(error: Exception) -> bool:
    """True for the PostgREST error raised by ``.single()`` on an empty result."""
    return getattr(error, "code", None) == NO_ROWS_CODE


class SupabaseClient:
    """Async context manager for a per-request Supabase client."""

    def __init__(self, access_token: Optional[str] = None):
        self.access_token = access_token
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = create_supabase_client(self.access_token)
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                error=str(exc_val),
                error_type=exc_type.__name__
            )
        self.client = None
        return False
