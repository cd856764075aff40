"""
Cursebreakers Backend - Profile API Tests
==========================================

What we test:
    ✅ Blog listing and lookup by username
    ✅ Profile edits overwrite metadata and re-issue the token
    ✅ Username changes follow through to lookups and post authorship
    ✅ Taken usernames/titles are rejected with nothing changed
    ✅ Only the signed-in owner may edit a profile
    ✅ A renamed user's old name, and its blog title, are free to register
"""

import pytest


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestReadProfiles:

    @pytest.mark.asyncio
    async def test_list_blogs(self, test_client, register_user):
        await register_user("alice")
        await register_user("bob")

        response = await test_client.get("/profile")

        assert response.status_code == 200
        blogs = response.json()["blogs"]
        assert [b["title"] for b in blogs] == ["alice", "bob"]
        assert blogs[0]["author"]["email"] == "alice@example.com"
        assert blogs[0]["url"] == "/profile/alice"

    @pytest.mark.asyncio
    async def test_list_blogs_empty(self, test_client):
        response = await test_client.get("/profile")
        assert response.status_code == 200
        assert response.json() == {"blogs": []}

    @pytest.mark.asyncio
    async def test_get_blog(self, test_client, register_user):
        await register_user("alice")

        response = await test_client.get("/profile/alice")

        assert response.status_code == 200
        blog = response.json()
        assert blog["title"] == "alice"
        assert blog["links"] == []
        assert blog["category"] is None

    @pytest.mark.asyncio
    async def test_get_blog_unknown_user(self, test_client):
        response = await test_client.get("/profile/nobody")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_user_posts(self, test_client, register_user):
        await register_user("alice")

        response = await test_client.get("/profile/alice/posts")

        assert response.status_code == 200
        posts = response.json()["posts"]
        assert len(posts) == 1
        assert posts[0]["author"] == "alice"

    @pytest.mark.asyncio
    async def test_user_posts_unknown_user(self, test_client):
        response = await test_client.get("/profile/nobody/posts")
        assert response.status_code == 404


class TestUpdateProfile:

    @pytest.mark.asyncio
    async def test_update_metadata(self, test_client, register_user):
        token = await register_user("alice")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={
                "newTitle": "Alice Writes",
                "userBefore": "alice",
                "newUsername": "alice",
                "category": "travel",
                "links": ["https://example.com/alice"],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Blog updated successfully"
        assert data["blog"]["title"] == "Alice Writes"
        assert data["blog"]["category"] == "travel"
        assert data["blog"]["links"] == ["https://example.com/alice"]

        stored = (await test_client.get("/profile/alice")).json()
        assert stored["title"] == "Alice Writes"

    @pytest.mark.asyncio
    async def test_rename_reissues_token(self, test_client, register_user):
        token = await register_user("alice")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={"userBefore": "alice", "newUsername": "alicia"},
        )

        assert response.status_code == 200
        new_token = response.json()["token"]
        check = await test_client.get("/auth/check", headers=_auth(new_token))
        assert check.json()["username"] == "alicia"

        assert (await test_client.get("/profile/alice")).status_code == 404
        renamed = (await test_client.get("/profile/alicia")).json()
        assert renamed["author"]["username"] == "alicia"
        assert renamed["posts"][0]["author"] == "alicia"

    @pytest.mark.asyncio
    async def test_rename_to_taken_username(self, test_client, register_user):
        token = await register_user("alice")
        await register_user("bob")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={"userBefore": "alice", "newUsername": "bob", "newTitle": "Changed", "category": "x"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Username is already taken"

        unchanged = (await test_client.get("/profile/alice")).json()
        assert unchanged["title"] == "alice"
        assert unchanged["category"] is None

    @pytest.mark.asyncio
    async def test_taken_title(self, test_client, register_user):
        token = await register_user("alice")
        await register_user("bob")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={"userBefore": "alice", "newTitle": "bob"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Blog title already exists"

    @pytest.mark.asyncio
    async def test_malformed_new_username(self, test_client, register_user):
        token = await register_user("alice")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={"userBefore": "alice", "newUsername": "no spaces allowed"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_edit_someone_elses_profile(self, test_client, register_user):
        await register_user("alice")
        bob_token = await register_user("bob")

        response = await test_client.post(
            "/profile/alice",
            headers=_auth(bob_token),
            json={"userBefore": "alice", "newTitle": "Hijacked"},
        )

        assert response.status_code == 401
        assert (await test_client.get("/profile/alice")).json()["title"] == "alice"

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client, register_user):
        await register_user("alice")

        response = await test_client.post("/profile/alice", json={"newTitle": "Anonymous"})

        assert response.status_code == 401


class TestNamesAfterRename:

    @pytest.mark.asyncio
    async def test_rename_moves_default_title(self, test_client, register_user):
        token = await register_user("bob")

        response = await test_client.post(
            "/profile/bob",
            headers=_auth(token),
            json={"userBefore": "bob", "newUsername": "robert"},
        )

        assert response.status_code == 200
        assert response.json()["blog"]["title"] == "robert"

    @pytest.mark.asyncio
    async def test_rename_keeps_custom_title(self, test_client, register_user):
        token = await register_user("bob")
        await test_client.post(
            "/profile/bob",
            headers=_auth(token),
            json={"userBefore": "bob", "newTitle": "Bob Builds"},
        )

        response = await test_client.post(
            "/profile/bob",
            headers=_auth(token),
            json={"userBefore": "bob", "newUsername": "robert"},
        )

        assert response.json()["blog"]["title"] == "Bob Builds"

    @pytest.mark.asyncio
    async def test_old_username_can_be_registered_again(self, test_client, register_user):
        token = await register_user("bob")
        await test_client.post(
            "/profile/bob",
            headers=_auth(token),
            json={"userBefore": "bob", "newUsername": "robert"},
        )

        response = await test_client.post(
            "/auth/new",
            json={
                "username": "bob",
                "email": "newbob@example.com",
                "password": "another-password",
                "confirmPassword": "another-password",
            },
        )

        assert response.status_code == 201
        assert (await test_client.get("/profile/bob")).json()["title"] == "bob"
        assert (await test_client.get("/profile/robert")).json()["title"] == "robert"

    @pytest.mark.asyncio
    async def test_title_holding_a_free_username(self, test_client, register_user):
        token = await register_user("alice")
        await test_client.post(
            "/profile/alice",
            headers=_auth(token),
            json={"userBefore": "alice", "newTitle": "carol"},
        )

        await register_user("carol")

        carol = (await test_client.get("/profile/carol")).json()
        assert carol["title"] == "carol-2"
        assert (await test_client.get("/profile/alice")).json()["title"] == "carol"
