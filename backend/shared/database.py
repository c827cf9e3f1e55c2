"""
Database client factory for Supabase.

The backend talks to Supabase with the service role key and enforces
ownership itself, so every repository query filters on user_id.
"""

from supabase import create_client, Client

from .config import Settings
from .exceptions import ConfigurationError


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role (bypasses RLS).

    The caller owns the returned client; the service container keeps
    one per application instance.

    Args:
        settings: Application settings with Supabase URL and key

    Returns:
        Supabase client configured with service role key

    Raises:
        ConfigurationError: If URL or key is not configured
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise ConfigurationError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables.",
            code="SUPABASE_NOT_CONFIGURED",
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )
