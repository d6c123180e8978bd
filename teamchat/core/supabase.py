from typing import Optional
from supabase import create_client, Client
from functools import lru_cache
import logging

from teamchat.core.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Lazy Supabase client used to verify access tokens against Supabase Auth."""

    def __init__(self):
        self._anon_client: Optional[Client] = None

    @property
    def configured(self) -> bool:
        return bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY)

    @property
    def anon(self) -> Client:
        if self._anon_client is None:
            self._anon_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        return self._anon_client

    def get_user_id(self, access_token: str) -> Optional[str]:
        """Return the id of the user owning ``access_token``, or None."""
        try:
            res = self.anon.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"Supabase token verification failed: {e}")
            return None
        if not res or not res.user:
            return None
        return res.user.id


@lru_cache()
def get_supabase() -> SupabaseClient:
    return SupabaseClient()


supabase = get_supabase()
