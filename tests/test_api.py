"""HTTP-level tests using FastAPI TestClient and signed test tokens."""

from __future__ import annotations

import re
from contextlib import asynccontextmanager

from teamchat.main import app
from teamchat.store import MemoryDocumentStore, TransactionAbortedError, get_store

from conftest import auth

API = "/api/v1"


def _create(client, name="Design", user="u1") -> str:
    resp = client.post(f"{API}/workspaces", json={"name": name}, headers=auth(user))
    assert resp.status_code == 200, resp.text
    return resp.json()["id"]


def _join_code(client, workspace_id, user="u1") -> str:
    return client.get(f"{API}/workspaces/{workspace_id}", headers=auth(user)).json()["join_code"]


class TestWorkspacesApi:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_design_scenario(self, client):
        workspace_id = _create(client)

        ws = client.get(f"{API}/workspaces/{workspace_id}", headers=auth("u1")).json()
        assert ws["name"] == "Design"
        assert re.fullmatch(r"[0-9a-z]{6}", ws["join_code"])

        # Not a member yet
        resp = client.get(f"{API}/workspaces/{workspace_id}", headers=auth("u2"))
        assert resp.status_code == 200
        assert resp.json() is None

        info = client.get(f"{API}/workspaces/{workspace_id}/info", headers=auth("u2")).json()
        assert info == {"name": "Design", "is_member": False}

        resp = client.post(
            f"{API}/workspaces/{workspace_id}/join",
            json={"join_code": ws["join_code"].upper()},
            headers=auth("u2"),
        )
        assert resp.status_code == 200
        assert resp.json() == {"id": workspace_id}

        assert client.get(f"{API}/workspaces/{workspace_id}", headers=auth("u2")).json()["id"] == workspace_id
        assert [w["id"] for w in client.get(f"{API}/workspaces", headers=auth("u2")).json()] == [workspace_id]

    def test_anonymous_callers(self, client):
        workspace_id = _create(client)

        assert client.get(f"{API}/workspaces").json() == []
        assert client.get(f"{API}/workspaces/{workspace_id}/info").json() is None

        resp = client.post(f"{API}/workspaces", json={"name": "Nope"})
        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False
        assert body["error_code"] == "UNAUTHORIZED"

        assert client.get(f"{API}/workspaces/{workspace_id}").status_code == 401
        assert client.delete(f"{API}/workspaces/{workspace_id}").status_code == 401

    def test_invalid_token_is_anonymous(self, client):
        headers = {"Authorization": "Bearer not-a-jwt"}
        assert client.get(f"{API}/workspaces", headers=headers).json() == []
        assert client.post(f"{API}/workspaces", json={"name": "x"}, headers=headers).status_code == 401

    def test_error_categories(self, client):
        workspace_id = _create(client)
        code = _join_code(client, workspace_id)

        resp = client.post(f"{API}/workspaces/missing/join", json={"join_code": code}, headers=auth("u2"))
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "NOT_FOUND"

        wrong = ("0" if code[0] != "0" else "1") + code[1:]
        resp = client.post(f"{API}/workspaces/{workspace_id}/join", json={"join_code": wrong}, headers=auth("u2"))
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_CODE"

        resp = client.post(f"{API}/workspaces/{workspace_id}/join", json={"join_code": code}, headers=auth("u1"))
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "ALREADY_MEMBER"

        resp = client.post(f"{API}/workspaces", json={"name": "  "}, headers=auth("u1"))
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "VALIDATION_ERROR"

    def test_rotate_rename_remove(self, client):
        workspace_id = _create(client)
        code = _join_code(client, workspace_id)
        client.post(f"{API}/workspaces/{workspace_id}/join", json={"join_code": code}, headers=auth("u2"))

        assert client.post(f"{API}/workspaces/{workspace_id}/join-code", headers=auth("u2")).status_code == 401
        assert client.patch(f"{API}/workspaces/{workspace_id}", json={"name": "X"}, headers=auth("u2")).status_code == 401

        resp = client.post(f"{API}/workspaces/{workspace_id}/join-code", headers=auth("u1"))
        assert resp.json() == {"id": workspace_id}

        resp = client.patch(f"{API}/workspaces/{workspace_id}", json={"name": "Product"}, headers=auth("u1"))
        assert resp.json() == {"id": workspace_id}
        assert client.get(f"{API}/workspaces/{workspace_id}", headers=auth("u2")).json()["name"] == "Product"

        assert client.delete(f"{API}/workspaces/{workspace_id}", headers=auth("u1")).json() == {"id": workspace_id}
        assert client.get(f"{API}/workspaces", headers=auth("u1")).json() == []
        assert client.get(f"{API}/workspaces", headers=auth("u2")).json() == []


class TestMembersAndChannelsApi:
    def test_members_flow(self, client):
        workspace_id = _create(client)
        code = _join_code(client, workspace_id)
        client.post(f"{API}/workspaces/{workspace_id}/join", json={"join_code": code}, headers=auth("u2"))

        me = client.get(f"{API}/members/current", params={"workspace_id": workspace_id}, headers=auth("u2")).json()
        assert me["role"] == "member"

        listed = client.get(f"{API}/members", params={"workspace_id": workspace_id}, headers=auth("u1")).json()
        assert {m["user_id"] for m in listed} == {"u1", "u2"}

        resp = client.patch(f"{API}/members/{me['id']}", json={"role": "owner"}, headers=auth("u1"))
        assert resp.status_code == 422

        resp = client.patch(f"{API}/members/{me['id']}", json={"role": "admin"}, headers=auth("u1"))
        assert resp.json() == {"id": me["id"]}
        assert client.get(f"{API}/members/{me['id']}", headers=auth("u1")).json()["role"] == "admin"

        # Admins cannot be removed
        assert client.delete(f"{API}/members/{me['id']}", headers=auth("u1")).status_code == 401

    def test_leave(self, client):
        workspace_id = _create(client)
        code = _join_code(client, workspace_id)
        client.post(f"{API}/workspaces/{workspace_id}/join", json={"join_code": code}, headers=auth("u2"))
        me = client.get(f"{API}/members/current", params={"workspace_id": workspace_id}, headers=auth("u2")).json()

        assert client.delete(f"{API}/members/{me['id']}", headers=auth("u2")).json() == {"id": me["id"]}
        assert client.get(f"{API}/members/current", params={"workspace_id": workspace_id}, headers=auth("u2")).json() is None

    def test_channels_flow(self, client):
        workspace_id = _create(client)

        resp = client.post(
            f"{API}/channels",
            json={"workspace_id": workspace_id, "name": "Product Launch"},
            headers=auth("u1"),
        )
        channel_id = resp.json()["id"]

        names = [c["name"] for c in client.get(f"{API}/channels", params={"workspace_id": workspace_id}, headers=auth("u1")).json()]
        assert names == ["general", "product-launch"]

        assert client.get(f"{API}/channels", params={"workspace_id": workspace_id}).json() == []

        resp = client.patch(f"{API}/channels/{channel_id}", json={"name": "launch"}, headers=auth("u1"))
        assert resp.json() == {"id": channel_id}
        assert client.get(f"{API}/channels/{channel_id}", headers=auth("u1")).json()["name"] == "launch"

        assert client.delete(f"{API}/channels/{channel_id}", headers=auth("u1")).json() == {"id": channel_id}
        assert client.get(f"{API}/channels/{channel_id}", headers=auth("u1")).json() is None
        assert client.delete(f"{API}/channels/{channel_id}", headers=auth("u1")).status_code == 404


class ConflictingStore(MemoryDocumentStore):
    """Store whose transactions are aborted by a concurrent update."""

    @asynccontextmanager
    async def transaction(self):
        raise TransactionAbortedError("could not serialize access due to concurrent update", retryable=True)
        yield


class TestStoreFailuresApi:
    def test_aborted_transaction_returns_error_envelope(self, client):
        app.dependency_overrides[get_store] = lambda: ConflictingStore()

        resp = client.patch(f"{API}/workspaces/w1", json={"name": "Renamed"}, headers=auth("u1"))
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error_code"] == "STORE_ERROR"
        assert body["details"] == {"operation": "workspaces.update"}

    def test_aborted_join_returns_error_envelope(self, client):
        app.dependency_overrides[get_store] = lambda: ConflictingStore()

        resp = client.post(f"{API}/workspaces/w1/join", json={"join_code": "abc123"}, headers=auth("u2"))
        assert resp.status_code == 500
        assert resp.json()["error_code"] == "STORE_ERROR"
