"""
Team Chat API - Channels Service
Business logic for workspace channels
"""

import re
import structlog
from typing import Optional, List

from teamchat.core.exceptions import NotFoundError, ValidationError
from teamchat.schemas import Channel
from teamchat.services.membership_service import MembershipService
from teamchat.store import DocumentStore

logger = structlog.get_logger()

CHANNEL_NAME_MIN_LENGTH = 3
CHANNEL_NAME_MAX_LENGTH = 80


def normalize_channel_name(name: str) -> str:
    """
    Slug a channel name: whitespace runs become "-", repeated dashes collapse,
    everything is lowercased.

    Raises:
        ValidationError: If the result is not 3-80 characters long
    """
    value = re.sub(r"\s+", "-", (name or "").strip())
    value = re.sub(r"-+", "-", value).lower()

    if not CHANNEL_NAME_MIN_LENGTH <= len(value) <= CHANNEL_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Channel name must be {CHANNEL_NAME_MIN_LENGTH}-{CHANNEL_NAME_MAX_LENGTH} characters",
            field="name"
        )
    return value


class ChannelsService:
    """Service for managing channels inside a workspace."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(self, workspace_id: str, name: str, user_id: Optional[str]) -> str:
        """Create a channel (admin only)."""
        user_id = MembershipService.require_user(user_id)
        name = normalize_channel_name(name)

        async with self.store.transaction() as tx:
            await MembershipService.require_admin(tx, user_id, workspace_id)
            channel_id = await tx.insert("channels", {"name": name, "workspace_id": workspace_id})

        logger.info("channel_created", channel_id=channel_id, workspace_id=workspace_id, user_id=user_id)
        return channel_id

    async def get(self, workspace_id: str, user_id: Optional[str]) -> List[Channel]:
        """Channels of a workspace; empty unless the caller is a member."""
        if not user_id:
            return []

        async with self.store.transaction() as tx:
            if not await MembershipService.get_member(tx, user_id, workspace_id):
                return []
            docs = await tx.query("channels", "by_workspace_id", workspace_id=workspace_id)

        return [Channel(**doc) for doc in docs]

    async def get_by_id(self, channel_id: str, user_id: Optional[str]) -> Optional[Channel]:
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            doc = await tx.get("channels", channel_id)
            if not doc:
                return None
            if not await MembershipService.get_member(tx, user_id, doc["workspace_id"]):
                return None

        return Channel(**doc)

    async def update(self, channel_id: str, name: str, user_id: Optional[str]) -> str:
        """Rename a channel (admin only)."""
        user_id = MembershipService.require_user(user_id)
        name = normalize_channel_name(name)

        async with self.store.transaction() as tx:
            doc = await tx.get("channels", channel_id)
            if not doc:
                raise NotFoundError("Channel", channel_id)

            await MembershipService.require_admin(tx, user_id, doc["workspace_id"])
            await tx.patch("channels", channel_id, {"name": name})

        logger.info("channel_renamed", channel_id=channel_id, user_id=user_id)
        return channel_id

    async def remove(self, channel_id: str, user_id: Optional[str]) -> str:
        """Delete a channel and its messages (admin only)."""
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            doc = await tx.get("channels", channel_id)
            if not doc:
                raise NotFoundError("Channel", channel_id)

            await MembershipService.require_admin(tx, user_id, doc["workspace_id"])
            messages = await tx.delete_many("messages", "by_channel_id", channel_id=channel_id)
            await tx.delete("channels", channel_id)

        logger.info("channel_removed", channel_id=channel_id, user_id=user_id, messages=messages)
        return channel_id
