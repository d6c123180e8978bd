"""
Team Chat API - Members Service
Business logic for workspace members
"""

import structlog
from typing import Optional, List

from teamchat.core.exceptions import NotFoundError, UnauthorizedError
from teamchat.schemas import Member, MemberRole
from teamchat.services.membership_service import MembershipService
from teamchat.store import DocumentStore

logger = structlog.get_logger()


class MembersService:
    """Service for listing members, changing roles and removing members."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def current(self, workspace_id: str, user_id: Optional[str]) -> Optional[Member]:
        """The caller's own membership, or None."""
        if not user_id:
            return None
        async with self.store.transaction() as tx:
            return await MembershipService.get_member(tx, user_id, workspace_id)

    async def get(self, workspace_id: str, user_id: Optional[str]) -> List[Member]:
        """All members of a workspace; empty unless the caller is a member."""
        if not user_id:
            return []

        async with self.store.transaction() as tx:
            if not await MembershipService.get_member(tx, user_id, workspace_id):
                return []
            docs = await tx.query("members", "by_workspace_id", workspace_id=workspace_id)

        return [Member(**doc) for doc in docs]

    async def get_by_id(self, member_id: str, user_id: Optional[str]) -> Optional[Member]:
        """A member record, visible only to members of the same workspace."""
        if not user_id:
            return None

        async with self.store.transaction() as tx:
            doc = await tx.get("members", member_id)
            if not doc:
                return None
            if not await MembershipService.get_member(tx, user_id, doc["workspace_id"]):
                return None

        return Member(**doc)

    async def update(self, member_id: str, role: MemberRole, user_id: Optional[str]) -> str:
        """Change a member's role (admin only; admins cannot change their own role)."""
        user_id = MembershipService.require_user(user_id)
        role = MemberRole(role)

        async with self.store.transaction() as tx:
            doc = await tx.get("members", member_id)
            if not doc:
                raise NotFoundError("Member", member_id)

            current = await MembershipService.require_admin(tx, user_id, doc["workspace_id"])
            if current.id == member_id:
                raise UnauthorizedError("Cannot change your own role")

            await tx.patch("members", member_id, {"role": role.value})

        logger.info("member_role_updated", member_id=member_id, role=role.value, user_id=user_id)
        return member_id

    async def remove(self, member_id: str, user_id: Optional[str]) -> str:
        """
        Remove a member: self-leave, or removal by an admin.

        Admins can never be removed, not even by themselves. The member's
        messages, reactions and direct conversations are deleted with it.
        """
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            doc = await tx.get("members", member_id)
            if not doc:
                raise NotFoundError("Member", member_id)
            member = Member(**doc)

            current = await MembershipService.require_member(tx, user_id, member.workspace_id)

            if member.role == MemberRole.ADMIN:
                raise UnauthorizedError("Admin cannot be removed")

            if current.id != member_id and current.role != MemberRole.ADMIN:
                raise UnauthorizedError()

            removed = {
                "messages": await tx.delete_many("messages", "by_member_id", member_id=member_id),
                "reactions": await tx.delete_many("reactions", "by_member_id", member_id=member_id),
                "conversations": (
                    await tx.delete_many("conversations", "by_member_one_id", member_one_id=member_id)
                    + await tx.delete_many("conversations", "by_member_two_id", member_two_id=member_id)
                ),
            }
            await tx.delete("members", member_id)

        logger.info(
            "member_removed",
            member_id=member_id,
            workspace_id=member.workspace_id,
            user_id=user_id,
            **removed
        )
        return member_id
