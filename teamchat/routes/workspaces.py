"""
Team Chat API - Workspaces Routes
Workspace lifecycle and join-code redemption
"""

from fastapi import APIRouter, Depends
from typing import Optional, List

from teamchat.core.auth import get_current_user_id
from teamchat.core.exceptions import StoreError
from teamchat.schemas import (
    IdResponse,
    Workspace,
    WorkspaceCreate,
    WorkspaceInfo,
    WorkspaceJoin,
    WorkspaceUpdate,
)
from teamchat.services import JoinService, WorkspacesService
from teamchat.store import DocumentStore, DocumentStoreError, get_store

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])


def get_workspaces_service(store: DocumentStore = Depends(get_store)) -> WorkspacesService:
    return WorkspacesService(store)


def get_join_service(store: DocumentStore = Depends(get_store)) -> JoinService:
    return JoinService(store)


@router.post("", response_model=IdResponse)
async def create_workspace(
    request: WorkspaceCreate,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """
    Create a new workspace.

    The caller becomes its admin and a `general` channel is created.
    """
    try:
        return IdResponse(id=await service.create(request.name, user_id))
    except DocumentStoreError as e:
        raise StoreError('workspaces.create', str(e))


@router.get("", response_model=List[Workspace])
async def list_workspaces(
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """
    List the caller's workspaces.

    Anonymous callers get an empty list.
    """
    try:
        return await service.get(user_id)
    except DocumentStoreError as e:
        raise StoreError('workspaces.get', str(e))


@router.get("/{workspace_id}", response_model=Optional[Workspace])
async def get_workspace(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """Get workspace details (null for non-members)."""
    try:
        return await service.get_by_id(workspace_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('workspaces.getById', str(e))


@router.get("/{workspace_id}/info", response_model=Optional[WorkspaceInfo])
async def get_workspace_info(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """
    Join preview.

    Returns the workspace name and whether the caller is already a member;
    null for anonymous callers.
    """
    try:
        return await service.get_info_by_id(workspace_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('workspaces.getInfoById', str(e))


@router.patch("/{workspace_id}", response_model=IdResponse)
async def update_workspace(
    workspace_id: str,
    request: WorkspaceUpdate,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """Rename workspace (Admin only)."""
    try:
        return IdResponse(id=await service.update(workspace_id, request.name, user_id))
    except DocumentStoreError as e:
        raise StoreError('workspaces.update', str(e))


@router.delete("/{workspace_id}", response_model=IdResponse)
async def remove_workspace(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """
    Delete workspace (Admin only).

    Members, channels, conversations, messages and reactions of the
    workspace are deleted with it.
    """
    try:
        return IdResponse(id=await service.remove(workspace_id, user_id))
    except DocumentStoreError as e:
        raise StoreError('workspaces.remove', str(e))


# ==================== Join Codes ====================

@router.post("/{workspace_id}/join-code", response_model=IdResponse)
async def new_join_code(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: WorkspacesService = Depends(get_workspaces_service)
):
    """Generate a new join code, invalidating the old one (Admin only)."""
    try:
        return IdResponse(id=await service.new_join_code(workspace_id, user_id))
    except DocumentStoreError as e:
        raise StoreError('workspaces.newJoinCode', str(e))


@router.post("/{workspace_id}/join", response_model=IdResponse)
async def join_workspace(
    workspace_id: str,
    request: WorkspaceJoin,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: JoinService = Depends(get_join_service)
):
    """Join a workspace with its join code (case-insensitive)."""
    try:
        return IdResponse(id=await service.join(workspace_id, request.join_code, user_id))
    except DocumentStoreError as e:
        raise StoreError('workspaces.join', str(e))
