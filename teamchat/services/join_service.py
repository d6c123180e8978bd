"""
Team Chat API - Join Service
Join-code generation and redemption
"""

import random
import structlog
from typing import Optional

from teamchat.core.exceptions import (
    AlreadyMemberError,
    InvalidJoinCodeError,
    NotFoundError,
)
from teamchat.schemas import MemberRole
from teamchat.services.membership_service import MembershipService
from teamchat.store import DocumentStore, DuplicateKeyError

logger = structlog.get_logger()

JOIN_CODE_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
JOIN_CODE_LENGTH = 6


def generate_join_code() -> str:
    """
    Six characters picked independently and uniformly from ``[0-9a-z]``.

    Join codes are a convenience for inviting people, not a secret: they come
    from the non-cryptographic ``random`` module and are not unique across
    workspaces. A code only has meaning together with its workspace id, and
    admins rotate it on demand.
    """
    return "".join(random.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


class JoinService:
    """Admits users into a workspace through its join code."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def join(
        self,
        workspace_id: str,
        join_code: str,
        user_id: Optional[str]
    ) -> str:
        """
        Redeem ``join_code`` for ``workspace_id`` and make the caller a member.

        The code is compared case-insensitively; stored codes are lowercase.

        Returns:
            The workspace id

        Raises:
            UnauthorizedError: Caller is anonymous
            NotFoundError: Workspace does not exist
            InvalidJoinCodeError: Code does not match
            AlreadyMemberError: Caller is already a member
        """
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            workspace = await tx.get("workspaces", workspace_id)
            if not workspace:
                raise NotFoundError("Workspace", workspace_id)

            if workspace["join_code"] != join_code.lower():
                logger.info("join_code_rejected", workspace_id=workspace_id, user_id=user_id)
                raise InvalidJoinCodeError()

            if await MembershipService.get_member(tx, user_id, workspace_id):
                raise AlreadyMemberError()

            try:
                await tx.insert("members", {
                    "user_id": user_id,
                    "workspace_id": workspace_id,
                    "role": MemberRole.MEMBER.value,
                })
            except DuplicateKeyError:
                # A concurrent join committed first
                raise AlreadyMemberError()

        logger.info("workspace_joined", workspace_id=workspace_id, user_id=user_id)
        return workspace_id
