"""
Team Chat API - Workspaces Service
Business logic for the workspace lifecycle
"""

import structlog
from typing import Optional, List

from teamchat.core.exceptions import ValidationError
from teamchat.schemas import MemberRole, Workspace, WorkspaceInfo
from teamchat.services.join_service import generate_join_code
from teamchat.services.membership_service import MembershipService
from teamchat.store import DocumentStore, WORKSPACE_DEPENDENT_TABLES

logger = structlog.get_logger()

DEFAULT_CHANNEL_NAME = "general"


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Workspace name is required", field="name")
    return name


class WorkspacesService:
    """Service for creating, renaming, rotating and deleting workspaces."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(self, name: str, user_id: Optional[str]) -> str:
        """
        Create a workspace owned by the caller.

        The workspace, the caller's admin membership and the default
        ``general`` channel are written in one transaction.

        Returns:
            The new workspace id
        """
        user_id = MembershipService.require_user(user_id)
        name = _clean_name(name)

        async with self.store.transaction() as tx:
            workspace_id = await tx.insert("workspaces", {
                "name": name,
                "join_code": generate_join_code(),
                "user_id": user_id,
            })
            await tx.insert("members", {
                "user_id": user_id,
                "workspace_id": workspace_id,
                "role": MemberRole.ADMIN.value,
            })
            await tx.insert("channels", {
                "name": DEFAULT_CHANNEL_NAME,
                "workspace_id": workspace_id,
            })

        logger.info("workspace_created", workspace_id=workspace_id, user_id=user_id)
        return workspace_id

    async def update(self, workspace_id: str, name: str, user_id: Optional[str]) -> str:
        """Rename a workspace (admin only)."""
        user_id = MembershipService.require_user(user_id)
        name = _clean_name(name)

        async with self.store.transaction() as tx:
            await MembershipService.require_admin(tx, user_id, workspace_id)
            await tx.patch("workspaces", workspace_id, {"name": name})

        logger.info("workspace_renamed", workspace_id=workspace_id, user_id=user_id)
        return workspace_id

    async def new_join_code(self, workspace_id: str, user_id: Optional[str]) -> str:
        """Replace the join code (admin only); the old code stops working on commit."""
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            await MembershipService.require_admin(tx, user_id, workspace_id)
            await tx.patch("workspaces", workspace_id, {"join_code": generate_join_code()})

        logger.info("join_code_rotated", workspace_id=workspace_id, user_id=user_id)
        return workspace_id

    async def remove(self, workspace_id: str, user_id: Optional[str]) -> str:
        """
        Delete a workspace and everything that references it (admin only).

        Every dependent deletion is awaited before the workspace itself is
        deleted. Deletes of already-missing records are no-ops, so running
        this again after a partial failure finishes the job.
        """
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            await MembershipService.require_admin(tx, user_id, workspace_id)

            removed = {}
            for table in WORKSPACE_DEPENDENT_TABLES:
                removed[table] = await tx.delete_many(table, "by_workspace_id", workspace_id=workspace_id)

            await tx.delete("workspaces", workspace_id)

        logger.info("workspace_removed", workspace_id=workspace_id, user_id=user_id, **removed)
        return workspace_id

    async def get(self, user_id: Optional[str]) -> List[Workspace]:
        """Workspaces the caller belongs to; empty for anonymous callers."""
        if not user_id:
            return []

        async with self.store.transaction() as tx:
            memberships = await tx.query("members", "by_user_id", user_id=user_id)

            workspaces = []
            for member in memberships:
                doc = await tx.get("workspaces", member["workspace_id"])
                # Membership may outlive a workspace removed elsewhere
                if doc:
                    workspaces.append(Workspace(**doc))

        return workspaces

    async def get_info_by_id(
        self,
        workspace_id: str,
        user_id: Optional[str]
    ) -> Optional[WorkspaceInfo]:
        """Name and membership flag for the join screen; None for anonymous callers."""
        if not user_id:
            return None

        async with self.store.transaction() as tx:
            member = await MembershipService.get_member(tx, user_id, workspace_id)
            doc = await tx.get("workspaces", workspace_id)

        return WorkspaceInfo(
            name=doc["name"] if doc else None,
            is_member=member is not None,
        )

    async def get_by_id(self, workspace_id: str, user_id: Optional[str]) -> Optional[Workspace]:
        """Full workspace record, or None when the caller is not a member."""
        user_id = MembershipService.require_user(user_id)

        async with self.store.transaction() as tx:
            member = await MembershipService.get_member(tx, user_id, workspace_id)
            if not member:
                return None
            doc = await tx.get("workspaces", workspace_id)

        return Workspace(**doc) if doc else None
