"""
Team Chat API - Core Module
"""

from teamchat.core.config import settings, get_settings
from teamchat.core.supabase import supabase, get_supabase, SupabaseClient
from teamchat.core.auth import (
    IdentityResolver,
    identity_resolver,
    get_current_user_id,
)
from teamchat.core.exceptions import (
    TeamChatException,
    UnauthorizedError,
    NotFoundError,
    InvalidJoinCodeError,
    AlreadyMemberError,
    ValidationError,
    StoreError,
)

__all__ = [
    # Config
    "settings",
    "get_settings",

    # Supabase
    "supabase",
    "get_supabase",
    "SupabaseClient",

    # Auth
    "IdentityResolver",
    "identity_resolver",
    "get_current_user_id",

    # Exceptions
    "TeamChatException",
    "UnauthorizedError",
    "NotFoundError",
    "InvalidJoinCodeError",
    "AlreadyMemberError",
    "ValidationError",
    "StoreError",
]
