"""
Team Chat API - Channels Routes
"""

from fastapi import APIRouter, Depends
from typing import Optional, List

from teamchat.core.auth import get_current_user_id
from teamchat.core.exceptions import StoreError
from teamchat.schemas import Channel, ChannelCreate, ChannelUpdate, IdResponse
from teamchat.services import ChannelsService
from teamchat.store import DocumentStore, DocumentStoreError, get_store

router = APIRouter(prefix="/channels", tags=["Channels"])


def get_channels_service(store: DocumentStore = Depends(get_store)) -> ChannelsService:
    return ChannelsService(store)


@router.post("", response_model=IdResponse)
async def create_channel(
    request: ChannelCreate,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ChannelsService = Depends(get_channels_service)
):
    """
    Create a channel (Admin only).

    The name is lowercased and whitespace is replaced with dashes.
    """
    try:
        return IdResponse(id=await service.create(request.workspace_id, request.name, user_id))
    except DocumentStoreError as e:
        raise StoreError('channels.create', str(e))


@router.get("", response_model=List[Channel])
async def list_channels(
    workspace_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ChannelsService = Depends(get_channels_service)
):
    try:
        return await service.get(workspace_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('channels.get', str(e))


@router.get("/{channel_id}", response_model=Optional[Channel])
async def get_channel(
    channel_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ChannelsService = Depends(get_channels_service)
):
    try:
        return await service.get_by_id(channel_id, user_id)
    except DocumentStoreError as e:
        raise StoreError('channels.getById', str(e))


@router.patch("/{channel_id}", response_model=IdResponse)
async def update_channel(
    channel_id: str,
    request: ChannelUpdate,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ChannelsService = Depends(get_channels_service)
):
    """Rename a channel (Admin only)."""
    try:
        return IdResponse(id=await service.update(channel_id, request.name, user_id))
    except DocumentStoreError as e:
        raise StoreError('channels.update', str(e))


@router.delete("/{channel_id}", response_model=IdResponse)
async def remove_channel(
    channel_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ChannelsService = Depends(get_channels_service)
):
    """Delete a channel and its messages (Admin only)."""
    try:
        return IdResponse(id=await service.remove(channel_id, user_id))
    except DocumentStoreError as e:
        raise StoreError('channels.remove', str(e))
