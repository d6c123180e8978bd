"""
Team Chat API - Workspace Schemas
Workspace management models
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class WorkspaceBase(BaseModel):
    """Base workspace fields."""
    name: str


class WorkspaceCreate(WorkspaceBase):
    """Create workspace."""
    pass


class WorkspaceUpdate(WorkspaceBase):
    """Rename workspace."""
    pass


class WorkspaceJoin(BaseModel):
    """Redeem a join code."""
    join_code: str = Field(..., min_length=1)


class Workspace(WorkspaceBase):
    """Full workspace record, visible to members only."""
    id: str
    join_code: str
    user_id: str  # creator, never reassigned
    created_at: Optional[datetime] = None


class WorkspaceInfo(BaseModel):
    """Join preview: the name is shown to non-members too."""
    name: Optional[str] = None
    is_member: bool
