"""Tests for channel management."""

from __future__ import annotations

import pytest

from teamchat.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from teamchat.services import normalize_channel_name

from conftest import count, seed

pytestmark = pytest.mark.anyio


@pytest.fixture
async def workspace(workspaces, joins):
    workspace_id = await workspaces.create("Design", "u1")
    code = (await workspaces.get_by_id(workspace_id, "u1")).join_code
    await joins.join(workspace_id, code, "u2")
    return workspace_id


class TestNormalize:
    @pytest.mark.parametrize("raw,expected", [
        ("Random", "random"),
        ("  Product   Launch ", "product-launch"),
        ("a - b", "a-b"),
        ("Q3--plans", "q3-plans"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_channel_name(raw) == expected

    @pytest.mark.parametrize("raw", ["", "ab", "   ", "x" * 81])
    def test_length_limits(self, raw):
        with pytest.raises(ValidationError):
            normalize_channel_name(raw)


class TestChannels:
    async def test_admin_creates_channel(self, channels, workspace):
        channel_id = await channels.create(workspace, "Product Launch", "u1")

        channel = await channels.get_by_id(channel_id, "u2")
        assert channel.name == "product-launch"
        assert channel.workspace_id == workspace

        names = [c.name for c in await channels.get(workspace, "u2")]
        assert names == ["general", "product-launch"]

    async def test_member_cannot_create(self, channels, workspace):
        with pytest.raises(UnauthorizedError):
            await channels.create(workspace, "random", "u2")

    async def test_list_hidden_from_outsiders(self, channels, workspace):
        assert await channels.get(workspace, "u9") == []
        assert await channels.get(workspace, None) == []

    async def test_get_by_id(self, channels, workspace):
        general = (await channels.get(workspace, "u1"))[0]
        assert await channels.get_by_id(general.id, "u9") is None
        assert await channels.get_by_id("missing", "u1") is None
        with pytest.raises(UnauthorizedError):
            await channels.get_by_id(general.id, None)

    async def test_rename(self, channels, workspace):
        general = (await channels.get(workspace, "u1"))[0]

        with pytest.raises(UnauthorizedError):
            await channels.update(general.id, "lobby", "u2")

        assert await channels.update(general.id, "Lobby Chat", "u1") == general.id
        assert (await channels.get_by_id(general.id, "u1")).name == "lobby-chat"

        with pytest.raises(NotFoundError):
            await channels.update("missing", "lobby", "u1")

    async def test_remove_cascades_messages(self, store, channels, workspace):
        channel_id = await channels.create(workspace, "random", "u1")
        await seed(store, "messages", workspace_id=workspace, channel_id=channel_id, member_id="m1", body="hi")
        await seed(store, "messages", workspace_id=workspace, channel_id=channel_id, member_id="m1", body="again")

        with pytest.raises(UnauthorizedError):
            await channels.remove(channel_id, "u2")

        assert await channels.remove(channel_id, "u1") == channel_id
        assert await channels.get_by_id(channel_id, "u1") is None
        assert await count(store, "messages", "by_channel_id", channel_id=channel_id) == 0

        with pytest.raises(NotFoundError):
            await channels.remove(channel_id, "u1")
