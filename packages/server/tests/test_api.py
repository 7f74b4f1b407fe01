"""
End-to-end API tests.

Covers:
- Sign up, login, logout and token revocation
- Soup CRUD with owner-only writes
- 400 "Validation failed" for bad bodies
- Star, un-star and toggle on soups and comments
- Soup comments and users' starred lists
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient


async def _sign_up(client: AsyncClient, email: str, name: str, password: str = "secret-pw") -> dict:
    resp = await client.post("/api/v1/users", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _login(client: AsyncClient, email: str, password: str = "secret-pw") -> dict:
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def alice_headers(client):
    await _sign_up(client, "alice@example.com", "alice")
    return await _login(client, "alice@example.com")


@pytest.fixture
async def bob_headers(client):
    await _sign_up(client, "bob@example.com", "bob")
    return await _login(client, "bob@example.com")


async def _create_soup(client, headers, content="tomato") -> dict:
    resp = await client.post("/api/v1/soups", json={"content": content}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Users and authentication
# ---------------------------------------------------------------------------


class TestUsersAndAuth:
    @pytest.mark.asyncio
    async def test_sign_up_never_returns_the_hash(self, client):
        body = await _sign_up(client, "carol@example.com", "carol")
        assert body["email"] == "carol@example.com"
        assert body["name"] == "carol"
        assert "password" not in body
        assert "password_hash" not in body

        resp = await client.get(f"/api/v1/users/{body['id']}")
        assert resp.status_code == 200
        assert "password_hash" not in resp.json()

    @pytest.mark.asyncio
    async def test_duplicate_sign_up(self, client):
        await _sign_up(client, "carol@example.com", "carol")
        resp = await client.post(
            "/api/v1/users", json={"email": "carol@example.com", "password": "secret-pw", "name": "c"}
        )
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_sign_up_validation(self, client):
        resp = await client.post("/api/v1/users", json={"email": "carol@example.com", "password": "123"})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Validation failed"}

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client):
        await _sign_up(client, "carol@example.com", "carol")
        resp = await client.post("/auth/login", json={"email": "carol@example.com", "password": "nope-nope"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, client, alice_headers):
        resp = await client.get("/auth/me", headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "alice"

    @pytest.mark.asyncio
    async def test_missing_and_bad_tokens(self, client):
        resp = await client.get("/auth/me")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Authentication required"

        resp = await client.get("/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired session"

    @pytest.mark.asyncio
    async def test_logout_revokes_token(self, client, alice_headers, fake_redis):
        resp = await client.post("/auth/logout", headers=alice_headers)
        assert resp.status_code == 200
        assert any(key.startswith("soupbox:session:revoked:") for key in fake_redis.store)

        resp = await client.get("/auth/me", headers=alice_headers)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Session has been revoked"

    @pytest.mark.asyncio
    async def test_unknown_user_profile(self, client):
        resp = await client.get(f"/api/v1/users/{uuid.uuid4()}")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Soups
# ---------------------------------------------------------------------------


class TestSoupEndpoints:
    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client):
        resp = await client.post("/api/v1/soups", json={"content": "anonymous"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_create_and_get(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers, "pumpkin")
        assert soup["user"]["name"] == "alice"
        assert soup["created_at"] == soup["updated_at"]

        resp = await client.get(f"/api/v1/soups/{soup['id']}")
        assert resp.status_code == 200
        assert resp.json()["content"] == "pumpkin"

    @pytest.mark.asyncio
    async def test_bad_bodies_are_400(self, client, alice_headers):
        resp = await client.post("/api/v1/soups", json={"content": ""}, headers=alice_headers)
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Validation failed"}

        resp = await client.post(
            "/api/v1/soups",
            content=b"{oops",
            headers={**alice_headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Validation failed"}

    @pytest.mark.asyncio
    async def test_owner_updates_and_deletes(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers, "leek")

        resp = await client.patch(f"/api/v1/soups/{soup['id']}", json={"content": "leek and potato"}, headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["content"] == "leek and potato"

        resp = await client.patch(f"/api/v1/soups/{soup['id']}", json={}, headers=alice_headers)
        assert resp.status_code == 200
        assert resp.json()["content"] == "leek and potato"

        resp = await client.delete(f"/api/v1/soups/{soup['id']}", headers=alice_headers)
        assert resp.status_code == 204

        resp = await client.get(f"/api/v1/soups/{soup['id']}")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_null_content_is_400(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers, "barley")

        resp = await client.patch(f"/api/v1/soups/{soup['id']}", json={"content": None}, headers=alice_headers)
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Validation failed"}

        resp = await client.get(f"/api/v1/soups/{soup['id']}")
        assert resp.json()["content"] == "barley"

    @pytest.mark.asyncio
    async def test_timestamps_are_utc_after_reload(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers)
        body = (await client.get(f"/api/v1/soups/{soup['id']}")).json()
        for field in ("created_at", "updated_at"):
            parsed = datetime.fromisoformat(body[field].replace("Z", "+00:00"))
            assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_non_owner_is_forbidden(self, client, alice_headers, bob_headers):
        soup = await _create_soup(client, alice_headers)

        resp = await client.patch(f"/api/v1/soups/{soup['id']}", json={"content": "mine now"}, headers=bob_headers)
        assert resp.status_code == 403

        resp = await client.delete(f"/api/v1/soups/{soup['id']}", headers=bob_headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_soup(self, client, alice_headers):
        missing = uuid.uuid4()
        assert (await client.get(f"/api/v1/soups/{missing}")).status_code == 404
        resp = await client.patch(f"/api/v1/soups/{missing}", json={"content": "x"}, headers=alice_headers)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_list_with_filters(self, client, alice_headers, bob_headers):
        await _create_soup(client, alice_headers, "chicken soup")
        await _create_soup(client, bob_headers, "Soup of the day")

        resp = await client.get("/api/v1/soups")
        assert resp.status_code == 200
        assert resp.json()["pagination"]["total"] == 2

        resp = await client.get("/api/v1/soups", params={"content": "soup"})
        assert [s["content"] for s in resp.json()["data"]] == ["chicken soup"]

        resp = await client.get("/api/v1/soups", params={"username": "bob"})
        assert [s["content"] for s in resp.json()["data"]] == ["Soup of the day"]

        resp = await client.get("/api/v1/soups", params=[("created_at", ">"), ("created_at", "2000-01-01T00:00:00")])
        assert resp.json()["pagination"]["total"] == 2

        resp = await client.get("/api/v1/soups", params=[("created_at", ">"), ("created_at", "2000-01-01T00:00:00Z")])
        assert resp.json()["pagination"]["total"] == 2

        resp = await client.get("/api/v1/soups", params=[("created_at", "<"), ("created_at", "2000-01-01T00:00:00")])
        assert resp.json()["pagination"]["total"] == 0

        resp = await client.get("/api/v1/soups", params={"created_at": ">"})
        assert resp.json()["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_pagination_bounds(self, client):
        assert (await client.get("/api/v1/soups", params={"page": 0})).status_code == 422
        assert (await client.get("/api/v1/soups", params={"per_page": 101})).status_code == 422


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


class TestStarEndpoints:
    @pytest.mark.asyncio
    async def test_star_flow(self, client, alice_headers, bob_headers):
        soup = await _create_soup(client, alice_headers)
        url = f"/api/v1/soups/{soup['id']}"

        resp = await client.post(f"{url}/star", headers=bob_headers)
        assert resp.status_code == 200
        assert resp.json() == {"star_count": 1, "is_starred": True}

        resp = await client.post(f"{url}/star", headers=bob_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "The resource is already starred by the current user"

        resp = await client.get(f"{url}/star", headers=bob_headers)
        assert resp.json() == {"star_count": 1, "is_starred": True}

        resp = await client.get(f"{url}/star")
        assert resp.json() == {"star_count": 1, "is_starred": None}

        resp = await client.delete(f"{url}/star", headers=bob_headers)
        assert resp.json() == {"star_count": 0, "is_starred": False}

        resp = await client.delete(f"{url}/star", headers=bob_headers)
        assert resp.status_code == 200
        assert resp.json()["star_count"] == 0

    @pytest.mark.asyncio
    async def test_toggle(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers)
        url = f"/api/v1/soups/{soup['id']}/toggle-star"

        resp = await client.post(url, headers=alice_headers)
        assert resp.json() == {"star_count": 1, "is_starred": True}
        resp = await client.post(url, headers=alice_headers)
        assert resp.json() == {"star_count": 0, "is_starred": False}

    @pytest.mark.asyncio
    async def test_star_requires_auth(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers)
        resp = await client.post(f"/api/v1/soups/{soup['id']}/star")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_star_unknown_soup(self, client, alice_headers):
        resp = await client.post(f"/api/v1/soups/{uuid.uuid4()}/star", headers=alice_headers)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_users_star_soups(self, client, alice_headers, bob_headers):
        soup = await _create_soup(client, alice_headers, "starred")
        await _create_soup(client, alice_headers, "not starred")
        await client.post(f"/api/v1/soups/{soup['id']}/star", headers=bob_headers)

        bob = (await client.get("/auth/me", headers=bob_headers)).json()
        resp = await client.get(f"/api/v1/users/{bob['id']}/star-soups")
        assert resp.status_code == 200
        assert [s["content"] for s in resp.json()["data"]] == ["starred"]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestCommentEndpoints:
    @pytest.mark.asyncio
    async def test_comment_flow(self, client, alice_headers, bob_headers):
        soup = await _create_soup(client, alice_headers)
        url = f"/api/v1/soups/{soup['id']}/comments"

        resp = await client.post(url, json={"content": "needs salt"}, headers=bob_headers)
        assert resp.status_code == 201
        comment = resp.json()
        assert comment["comment_type"] == "soup"
        assert comment["comment_type_id"] == soup["id"]
        assert comment["user"]["name"] == "bob"

        resp = await client.get(url)
        assert [c["content"] for c in resp.json()["data"]] == ["needs salt"]

        resp = await client.get(f"{url}/count")
        assert resp.json() == {"count": 1}

    @pytest.mark.asyncio
    async def test_comment_validation_and_auth(self, client, alice_headers):
        soup = await _create_soup(client, alice_headers)
        url = f"/api/v1/soups/{soup['id']}/comments"

        assert (await client.post(url, json={"content": "hi"})).status_code == 401
        resp = await client.post(url, json={"content": ""}, headers=alice_headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_comment_stars(self, client, alice_headers, bob_headers):
        soup = await _create_soup(client, alice_headers)
        resp = await client.post(
            f"/api/v1/soups/{soup['id']}/comments", json={"content": "lovely"}, headers=bob_headers
        )
        comment_id = resp.json()["id"]

        resp = await client.post(f"/api/v1/comments/{comment_id}/star", headers=alice_headers)
        assert resp.json() == {"star_count": 1, "is_starred": True}
        resp = await client.post(f"/api/v1/comments/{comment_id}/star", headers=alice_headers)
        assert resp.status_code == 403

        alice = (await client.get("/auth/me", headers=alice_headers)).json()
        resp = await client.get(f"/api/v1/users/{alice['id']}/star-comments")
        assert [c["id"] for c in resp.json()["data"]] == [comment_id]

        resp = await client.post(f"/api/v1/comments/{comment_id}/toggle-star", headers=alice_headers)
        assert resp.json() == {"star_count": 0, "is_starred": False}

        resp = await client.delete(f"/api/v1/comments/{comment_id}/star", headers=alice_headers)
        assert resp.json() == {"star_count": 0, "is_starred": False}
