"""Tests for bearer-token identity resolution."""

from __future__ import annotations

import pytest

from teamchat.core.auth import IdentityResolver
from teamchat.core.config import settings

from conftest import make_token

pytestmark = pytest.mark.anyio


class FakeSupabase:
    def __init__(self, users=None, configured=True):
        self.users = users or {}
        self.configured = configured
        self.calls = []

    def get_user_id(self, token):
        self.calls.append(token)
        return self.users.get(token)


class TestLocalJwt:
    async def test_valid_token(self):
        resolver = IdentityResolver(FakeSupabase())
        assert await resolver.resolve(make_token("u1")) == "u1"

    async def test_missing_or_bad_token(self):
        resolver = IdentityResolver(FakeSupabase())
        assert await resolver.resolve(None) is None
        assert await resolver.resolve("garbage") is None

    async def test_wrong_audience(self):
        from jose import jwt

        token = jwt.encode({"sub": "u1", "aud": "anon"}, "test-secret", algorithm="HS256")
        assert await IdentityResolver(FakeSupabase()).resolve(token) is None

    async def test_local_verification_skips_supabase(self):
        fake = FakeSupabase()
        await IdentityResolver(fake).resolve(make_token("u1"))
        assert fake.calls == []


class TestSupabaseVerification:
    async def test_remote_lookup(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        fake = FakeSupabase(users={"tok": "u7"})
        resolver = IdentityResolver(fake)

        assert await resolver.resolve("tok") == "u7"
        assert await resolver.resolve("other") is None
        assert fake.calls == ["tok", "other"]

    async def test_unconfigured_is_anonymous(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)
        fake = FakeSupabase(configured=False)

        assert await IdentityResolver(fake).resolve("tok") is None
        assert fake.calls == []
