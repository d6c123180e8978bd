"""
Team Chat API - Members Routes
"""

from fastapi import APIRouter, Depends
from typing import Optional, List

from teamchat.core.auth import get_current_user_id
from teamchat.core.exceptions import StoreError
from teamchat.schemas import IdResponse, Member, MemberUpdate
from teamchat.services import MembersService
from teamchat.store import DocumentStore, DocumentStoreError, get_store

router = APIRouter(prefix="/members", tags=["Members"])


def get_members_service(store: DocumentStore = Depends(get_store)) -> MembersService:
    return MembersService(store)


@router.get("", response_model=List[Member])
async def list_members(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: MembersService = Depends(get_members_service)
):
    """List workspace members (empty unless the caller is a member)."""
    try:
        return await service.get(workspace_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('members.get', str(e))


@router.get("/current", response_model=Optional[Member])
async def current_member(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: MembersService = Depends(get_members_service)
):
    """The caller's membership in a workspace."""
    try:
        return await service.current(workspace_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('members.current', str(e))


@router.get("/{member_id}", response_model=Optional[Member])
async def get_member(
    member_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: MembersService = Depends(get_members_service)
):
    try:
        return await service.get_by_id(member_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('members.getById', str(e))


@router.patch("/{member_id}", response_model=IdResponse)
async def update_member(
    member_id: str,
    request: MemberUpdate,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: MembersService = Depends(get_members_service)
):
    """Change a member's role (Admin only)."""
    try:
        return IdResponse(id=await service.update(member_id, request.role, user_id))
    except DocumentStoreError as e:
        raise StoreError('members.update', str(e))


@router.delete("/{member_id}", response_model=IdResponse)
async def remove_member(
    member_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: MembersService = Depends(get_members_service)
):
    """
    Remove a member or leave a workspace.

    Admins can remove other non-admin members; members can only remove
    themselves.
    """
    try:
        return IdResponse(id=await service.remove(member_id, user_id))
    except DocumentStoreError as e:
        raise StoreError('members.remove', str(e))
