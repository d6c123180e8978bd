"""
Team Chat API - Channel Schemas
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ChannelBase(BaseModel):
    name: str


class ChannelCreate(ChannelBase):
    workspace_id: str


class ChannelUpdate(ChannelBase):
    pass


class Channel(ChannelBase):
    id: str
    workspace_id: str
    created_at: Optional[datetime] = None
