"""
Team Chat API - Membership Service
Membership and role checks gating every workspace mutation
"""

import structlog
from typing import Optional

from teamchat.core.exceptions import UnauthorizedError
from teamchat.schemas import Member, MemberRole
from teamchat.store import Transaction

logger = structlog.get_logger()


class MembershipService:
    """
    Read-only authorization checks.

    All lookups go through the unique ``by_workspace_id_user_id`` index and
    run inside the caller's transaction, so the check and the write that
    follows it see the same snapshot.
    """

    @staticmethod
    def require_user(user_id: Optional[str]) -> str:
        """Fail unless the caller is authenticated."""
        if not user_id:
            raise UnauthorizedError()
        return user_id

    @staticmethod
    async def get_member(
        tx: Transaction,
        user_id: Optional[str],
        workspace_id: str
    ) -> Optional[Member]:
        """The caller's membership in a workspace, or None."""
        if not user_id:
            return None
        doc = await tx.unique(
            "members",
            "by_workspace_id_user_id",
            workspace_id=workspace_id,
            user_id=user_id
        )
        return Member(**doc) if doc else None

    @staticmethod
    async def require_member(
        tx: Transaction,
        user_id: Optional[str],
        workspace_id: str
    ) -> Member:
        """
        Return the caller's membership.

        Raises:
            UnauthorizedError: If the caller is anonymous or not a member
        """
        member = await MembershipService.get_member(tx, user_id, workspace_id)
        if member is None:
            logger.info("membership_denied", user_id=user_id, workspace_id=workspace_id)
            raise UnauthorizedError()
        return member

    @staticmethod
    async def require_admin(
        tx: Transaction,
        user_id: Optional[str],
        workspace_id: str
    ) -> Member:
        """
        Return the caller's membership if it carries the admin role.

        Raises:
            UnauthorizedError: If the caller is anonymous, not a member, or not an admin
        """
        member = await MembershipService.require_member(tx, user_id, workspace_id)
        if member.role != MemberRole.ADMIN:
            logger.info("admin_required", user_id=user_id, workspace_id=workspace_id, role=member.role.value)
            raise UnauthorizedError()
        return member
