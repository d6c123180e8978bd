"""Shared pytest fixtures for Team Chat API tests."""

from __future__ import annotations

import os

import pytest

# Configure the app before anything imports teamchat settings.
os.environ["STORE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from jose import jwt  # noqa: E402

from teamchat.services import (  # noqa: E402
    ChannelsService,
    JoinService,
    MembersService,
    WorkspacesService,
)
from teamchat.store import MemoryDocumentStore, get_store  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store() -> MemoryDocumentStore:
    """A fresh, empty in-memory store per test."""
    return MemoryDocumentStore()


@pytest.fixture
def workspaces(store) -> WorkspacesService:
    return WorkspacesService(store)


@pytest.fixture
def joins(store) -> JoinService:
    return JoinService(store)


@pytest.fixture
def members(store) -> MembersService:
    return MembersService(store)


@pytest.fixture
def channels(store) -> ChannelsService:
    return ChannelsService(store)


@pytest.fixture
def client(store):
    """TestClient whose routes use the per-test store."""
    from fastapi.testclient import TestClient
    from teamchat.main import app

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_token(user_id: str) -> str:
    """A Supabase-style access token signed with the test secret."""
    return jwt.encode(
        {"sub": user_id, "aud": "authenticated", "role": "authenticated"},
        "test-secret",
        algorithm="HS256",
    )


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


async def count(store, table: str, index: str, **values) -> int:
    async with store.transaction() as tx:
        return len(await tx.query(table, index, **values))


async def seed(store, table: str, **fields) -> str:
    async with store.transaction() as tx:
        return await tx.insert(table, fields)
