from supabase import create_client, Client
from typing import Optional

from admin_panel.config.settings import settings


class SupabaseClient:
    """Two lazily built handles: anon for Supabase Auth, service role for table data.

    Table queries never run on the auth handle, so its session state is never theirs.
    """
    _auth_client: Optional[Client] = None
    _data_client: Optional[Client] = None

    @classmethod
    def auth_client(cls) -> Client:
        if cls._auth_client is None:
            cls._auth_client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._auth_client

    @classmethod
    def data_client(cls) -> Client:
        if cls._data_client is None:
            key = settings.supabase_service_role_key or settings.supabase_key
            cls._data_client = create_client(settings.supabase_url, key)
        return cls._data_client

    @classmethod
    def reset(cls):
        cls._auth_client = None
        cls._data_client = None


def get_supabase() -> Client:
    return SupabaseClient.data_client()


def get_auth_client() -> Client:
    return SupabaseClient.auth_client()
