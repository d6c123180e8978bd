"""
Team Chat API - Services Module
Business logic layer for all domain services
"""

from teamchat.services.membership_service import MembershipService
from teamchat.services.join_service import JoinService, generate_join_code
from teamchat.services.workspaces_service import WorkspacesService
from teamchat.services.members_service import MembersService
from teamchat.services.channels_service import ChannelsService, normalize_channel_name

__all__ = [
    "MembershipService",
    "JoinService",
    "generate_join_code",
    "WorkspacesService",
    "MembersService",
    "ChannelsService",
    "normalize_channel_name",
]
