"""
Team Chat API - Authentication & Dependencies
Resolves the bearer token of a request to a user id
"""

import anyio
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
import logging

from teamchat.core.config import settings
from teamchat.core.supabase import supabase, SupabaseClient

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


class IdentityResolver:
    """
    Maps an access token to the authenticated user id.

    Tokens are Supabase-issued JWTs. When ``JWT_SECRET`` is configured they
    are verified locally; otherwise the token is checked with Supabase Auth.
    An absent or invalid token resolves to ``None`` so that lenient read
    endpoints can still answer anonymous callers.
    """

    def __init__(self, supabase_client: SupabaseClient):
        self.supabase = supabase_client

    def decode_token(self, token: str) -> Optional[str]:
        """Verify an HS256 token locally and return its subject."""
        try:
            claims = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
            )
        except JWTError as e:
            logger.info(f"Rejected access token: {e}")
            return None
        return claims.get("sub")

    async def resolve(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None

        if settings.JWT_SECRET:
            return self.decode_token(token)

        if not self.supabase.configured:
            logger.error("No JWT_SECRET or Supabase credentials configured; treating caller as anonymous")
            return None

        # Supabase client is sync, run it in a worker thread
        return await anyio.to_thread.run_sync(
            lambda: self.supabase.get_user_id(token)
        )


# Dependency instances
identity_resolver = IdentityResolver(supabase)


# ==================== FastAPI Dependencies ====================

async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Dependency returning the caller's user id, or None for anonymous callers.

    Authorization decisions are made by the services, which receive this id
    explicitly.

    Usage:
        @router.get("/workspaces")
        async def list_workspaces(user_id: Optional[str] = Depends(get_current_user_id)):
            ...
    """
    token = credentials.credentials if credentials else None
    return await identity_resolver.resolve(token)
