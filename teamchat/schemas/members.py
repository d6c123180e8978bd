"""
Team Chat API - Member Schemas
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from .common import MemberRole


class Member(BaseModel):
    id: str
    user_id: str
    workspace_id: str
    role: MemberRole
    created_at: Optional[datetime] = None


class MemberUpdate(BaseModel):
    """Change a member's role."""
    role: MemberRole
