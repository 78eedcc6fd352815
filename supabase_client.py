# supabase_client.py

from supabase import Client, create_client

from config import Settings


def get_supabase_client(settings: Settings, admin: bool = False) -> Client:
    """
    Create a Supabase client.

    With admin=True the service role key is used when it is configured
    (bypasses RLS, needed for catalog and combo writes); otherwise the
    anon key.
    """
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in the environment")

    key = settings.supabase_key
    if admin and settings.supabase_service_key:
        key = settings.supabase_service_key

    return create_client(settings.supabase_url, key)


def get_database(settings: Settings, admin: bool = False):
    """
    Schema-scoped query interface (`.table(name)`) handed to the services.
    """
    return get_supabase_client(settings, admin=admin).schema(settings.schema)
