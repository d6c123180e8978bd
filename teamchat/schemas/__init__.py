"""
Team Chat API - Schemas Package
Centralized exports for all Pydantic schemas
"""

# Common (Enums and Base Models)
from .common import (
    # Enums
    MemberRole,
    # Responses
    IdResponse,
    ErrorResponse,
)

# Workspaces
from .workspaces import (
    WorkspaceBase,
    WorkspaceCreate,
    WorkspaceUpdate,
    WorkspaceJoin,
    Workspace,
    WorkspaceInfo,
)

# Members
from .members import (
    Member,
    MemberUpdate,
)

# Channels
from .channels import (
    ChannelBase,
    ChannelCreate,
    ChannelUpdate,
    Channel,
)

__all__ = [
    "MemberRole",
    "IdResponse",
    "ErrorResponse",
    "WorkspaceBase",
    "WorkspaceCreate",
    "WorkspaceUpdate",
    "WorkspaceJoin",
    "Workspace",
    "WorkspaceInfo",
    "Member",
    "MemberUpdate",
    "ChannelBase",
    "ChannelCreate",
    "ChannelUpdate",
    "Channel",
]
