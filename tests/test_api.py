"""
HTTP tests for the auth, groups and bookmarks endpoints.

Run against the in-memory store and a fake token verifier.
"""
from bookmarks_api.core.config import settings
from bookmarks_api.core.responses import Messages
from bookmarks_api.services.bookmark_service import bookmark_path
from bookmarks_api.services.group_service import group_path
from bookmarks_api.services.user_service import user_path
from conftest import USER_ID


def _create_group(client, headers, name="Reading") -> str:
    response = client.post("/groups", json={"name": name}, headers=headers)
    assert response.status_code == 200
    return response.json()["data"]["groupId"]


def _create_bookmark(client, headers, group_id, title) -> dict:
    response = client.post(
        "/bookmarks",
        json={"title": title, "url": f"https://{title.lower()}.test", "groupId": group_id},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()["data"]


def _titles(client, headers, group_id) -> list:
    response = client.get("/bookmarks", params={"groupId": group_id}, headers=headers)
    return [b["title"] for b in response.json()["bookmarks"]]


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_lifespan_connects_store(client, store) -> None:
    assert store.connected == 1


class TestAuthentication:
    def test__missing_token(self, client) -> None:
        response = client.get("/groups")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["status"] == "UNAUTHORIZED"

    def test__invalid_token(self, client, store) -> None:
        response = client.post("/groups", json={"name": "x"}, headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token format"
        assert store.documents == {}

    def test__google_sign_in_creates_profile(self, client, store) -> None:
        response = client.post("/auth/google", json={"idToken": "good-token"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "SUCCESS"
        assert body["data"]["user"]["uid"] == USER_ID
        assert body["data"]["user"]["displayName"] == "Ada Lovelace"
        assert user_path(USER_ID) in store.documents

    def test__google_sign_in_requires_token(self, client) -> None:
        response = client.post("/auth/google", json={})

        assert response.status_code == 400
        assert response.json()["status"] == "BAD_REQUEST"

    def test__google_sign_in_rejects_bad_token(self, client) -> None:
        response = client.post("/auth/google", json={"idToken": "forged"})

        assert response.status_code == 401
        assert response.json()["status"] == "UNAUTHORIZED"

    def test__verify_unknown_user(self, client, auth_headers) -> None:
        response = client.get("/auth/verify", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["status"] == "NOT_FOUND"

    def test__verify_after_sign_in(self, client, auth_headers) -> None:
        client.post("/auth/google", json={"idToken": "good-token"})

        response = client.get("/auth/verify", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "ada@example.com"


class TestGroups:
    def test__create_and_list(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers, "Work")

        response = client.get("/groups", headers=auth_headers)

        groups = response.json()["groups"]
        assert [(g["groupId"], g["groupName"]) for g in groups] == [(group_id, "Work")]

    def test__create_requires_name(self, client, auth_headers, store) -> None:
        response = client.post("/groups", json={"name": "  "}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "REQUIRED_FIELDS"
        assert store.documents == {}

    def test__rename(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers)

        response = client.put("/groups", json={"groupId": group_id, "name": "Later"}, headers=auth_headers)

        assert response.json()["data"]["groupName"] == "Later"

    def test__rename_missing_group(self, client, auth_headers) -> None:
        response = client.put("/groups", json={"groupId": "nope", "name": "Later"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == Messages.GROUP_NOT_FOUND

    def test__delete_hides_group_and_bookmarks(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        bookmark = _create_bookmark(client, auth_headers, group_id, "A")

        response = client.delete("/groups", params={"groupId": group_id}, headers=auth_headers)

        assert response.json()["success"] is True
        assert client.get("/groups", headers=auth_headers).json()["groups"] == []
        assert store.documents[bookmark_path(USER_ID, group_id, bookmark["id"])]["deleted"] is True

    def test__rename_rejects_nested_path(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        bookmark = _create_bookmark(client, auth_headers, group_id, "A")
        nested = f"{group_id}/items/{bookmark['id']}"
        before = dict(store.documents[bookmark_path(USER_ID, group_id, bookmark["id"])])

        response = client.put("/groups", json={"groupId": nested, "name": "Hijack"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "REQUIRED_FIELDS"
        assert response.json()["fields"] == ["group_id"]
        assert store.documents[bookmark_path(USER_ID, group_id, bookmark["id"])] == before

    def test__groups_are_per_user(self, client, auth_headers) -> None:
        _create_group(client, auth_headers)

        response = client.get("/groups", headers={"Authorization": "Bearer other-token"})

        assert response.json()["groups"] == []


class TestBookmarks:
    def test__create_appends(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        first = _create_bookmark(client, auth_headers, group_id, "A")
        second = _create_bookmark(client, auth_headers, group_id, "B")

        assert (first["position"], second["position"]) == (0, 1)
        assert second["favicon"] == "https://icons.test/icon.png"
        assert store.documents[bookmark_path(USER_ID, group_id, second["id"])]["groupId"] == group_id

    def test__create_missing_fields(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        before = dict(store.documents)

        response = client.post("/bookmarks", json={"title": "A", "groupId": group_id}, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "REQUIRED_FIELDS"
        assert body["fields"] == ["url"]
        assert store.documents == before

    def test__create_in_missing_group(self, client, auth_headers) -> None:
        response = client.post(
            "/bookmarks", json={"title": "A", "url": "https://a.test", "groupId": "nope"}, headers=auth_headers
        )

        assert response.status_code == 404

    def test__update_in_place(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers)
        bookmark = _create_bookmark(client, auth_headers, group_id, "A")

        response = client.put("/bookmarks", json={
            "bookmarkId": bookmark["id"], "groupId": group_id, "title": "Renamed", "url": bookmark["url"],
        }, headers=auth_headers)

        data = response.json()["data"]
        assert data["moved"] is False
        assert data["bookmark"]["title"] == "Renamed"
        assert data["bookmark"]["position"] == 0

    def test__update_into_other_group_moves(self, client, auth_headers) -> None:
        source = _create_group(client, auth_headers, "Source")
        target = _create_group(client, auth_headers, "Target")
        bookmark = _create_bookmark(client, auth_headers, source, "A")
        _create_bookmark(client, auth_headers, target, "B")

        response = client.put("/bookmarks", json={
            "bookmarkId": bookmark["id"], "groupId": target, "title": "A", "url": bookmark["url"],
        }, headers=auth_headers)

        data = response.json()["data"]
        assert data["moved"] is True
        assert (data["fromGroupId"], data["toGroupId"]) == (source, target)
        assert _titles(client, auth_headers, source) == []
        assert _titles(client, auth_headers, target) == ["A", "B"]

    def test__reposition_within_group(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers)
        _create_bookmark(client, auth_headers, group_id, "A")
        _create_bookmark(client, auth_headers, group_id, "B")
        c = _create_bookmark(client, auth_headers, group_id, "C")

        response = client.patch("/bookmarks", params={
            "fromGroupId": group_id, "toGroupId": group_id, "bookmarkId": c["id"], "position": "0",
        }, headers=auth_headers)

        body = response.json()
        assert body["data"]["moved"] is False
        assert body["data"]["position"] == 0
        assert _titles(client, auth_headers, group_id) == ["C", "A", "B"]

    def test__move_across_groups(self, client, auth_headers, store) -> None:
        source = _create_group(client, auth_headers, "Source")
        target = _create_group(client, auth_headers, "Target")
        a = _create_bookmark(client, auth_headers, source, "A")
        _create_bookmark(client, auth_headers, target, "X")
        _create_bookmark(client, auth_headers, target, "Y")

        response = client.patch("/bookmarks", params={
            "fromGroupId": source, "toGroupId": target, "bookmarkId": a["id"], "position": "1",
        }, headers=auth_headers)

        data = response.json()["data"]
        assert data["moved"] is True
        assert (data["fromGroupName"], data["toGroupName"]) == ("Source", "Target")
        assert _titles(client, auth_headers, target) == ["X", "A", "Y"]
        assert bookmark_path(USER_ID, source, a["id"]) not in store.documents

    def test__huge_position_appends(self, client, auth_headers) -> None:
        source = _create_group(client, auth_headers, "Source")
        target = _create_group(client, auth_headers, "Target")
        a = _create_bookmark(client, auth_headers, source, "A")
        b = _create_bookmark(client, auth_headers, source, "B")
        _create_bookmark(client, auth_headers, target, "X")

        same = client.patch("/bookmarks", params={
            "fromGroupId": source, "toGroupId": source, "bookmarkId": a["id"], "position": str(10**20),
        }, headers=auth_headers)
        across = client.patch("/bookmarks", params={
            "fromGroupId": source, "toGroupId": target, "bookmarkId": b["id"], "position": str(10**20),
        }, headers=auth_headers)

        assert same.status_code == 200
        assert same.json()["data"]["position"] == 1
        assert _titles(client, auth_headers, source) == ["A"]
        assert across.status_code == 200
        assert across.json()["data"]["position"] == 1
        assert _titles(client, auth_headers, target) == ["X", "B"]

    def test__move_rejects_bad_position(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        a = _create_bookmark(client, auth_headers, group_id, "A")
        batches = len(store.batches)

        response = client.patch("/bookmarks", params={
            "fromGroupId": group_id, "toGroupId": group_id, "bookmarkId": a["id"], "position": "-3",
        }, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "REQUIRED_FIELDS"
        assert body["message"] == "All fields are required and position must be a valid number!"
        assert len(store.batches) == batches

    def test__move_missing_bookmark(self, client, auth_headers) -> None:
        source = _create_group(client, auth_headers, "Source")
        target = _create_group(client, auth_headers, "Target")

        response = client.patch("/bookmarks", params={
            "fromGroupId": source, "toGroupId": target, "bookmarkId": "ghost", "position": "0",
        }, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == Messages.BOOKMARK_NOT_FOUND

    def test__list_all_groups_bookmarks(self, client, auth_headers) -> None:
        work = _create_group(client, auth_headers, "Work")
        _create_bookmark(client, auth_headers, work, "A")

        response = client.get("/bookmarks", headers=auth_headers)

        body = response.json()
        assert body["success"] is True
        assert [entry["group"]["name"] for entry in body["bookmarks"]] == ["Work"]
        assert [b["title"] for b in body["bookmarks"][0]["bookmarks"]] == ["A"]
        assert body["groups"][0]["id"] == work

    def test__delete_with_legacy_aliases(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        a = _create_bookmark(client, auth_headers, group_id, "A")

        response = client.delete("/bookmarks", params={"g_id": group_id, "id": a["id"]}, headers=auth_headers)

        assert response.json()["data"]["actualGroupId"] == group_id
        assert store.documents[bookmark_path(USER_ID, group_id, a["id"])]["deleted"] is True
        assert _titles(client, auth_headers, group_id) == []

    def test__delete_with_stale_group(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers)
        a = _create_bookmark(client, auth_headers, group_id, "A")

        response = client.delete(
            "/bookmarks", params={"groupId": "stale", "bookmarkId": a["id"]}, headers=auth_headers
        )

        assert response.json()["data"]["actualGroupId"] == group_id

    def test__delete_missing_bookmark(self, client, auth_headers) -> None:
        group_id = _create_group(client, auth_headers)

        response = client.delete(
            "/bookmarks", params={"groupId": group_id, "bookmarkId": "ghost"}, headers=auth_headers
        )

        assert response.status_code == 404

    def test__store_failure_hides_error_in_production(self, client, auth_headers, store) -> None:
        group_id = _create_group(client, auth_headers)
        _create_bookmark(client, auth_headers, group_id, "A")
        b = _create_bookmark(client, auth_headers, group_id, "B")
        store.fail_next_batch = True

        response = client.patch("/bookmarks", params={
            "fromGroupId": group_id, "toGroupId": group_id, "bookmarkId": b["id"], "position": "0",
        }, headers=auth_headers)

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "ERROR"
        assert "error" not in body
        assert _titles(client, auth_headers, group_id) == ["A", "B"]


def test_group_documents_carry_owner(client, auth_headers, store) -> None:
    group_id = _create_group(client, auth_headers)
    assert store.documents[group_path(USER_ID, group_id)]["ownerUserId"] == USER_ID


def test_store_failure_shows_error_outside_production(client, auth_headers, store, monkeypatch) -> None:
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    group_id = _create_group(client, auth_headers)
    _create_bookmark(client, auth_headers, group_id, "A")
    b = _create_bookmark(client, auth_headers, group_id, "B")
    store.fail_next_batch = True

    response = client.patch("/bookmarks", params={
        "fromGroupId": group_id, "toGroupId": group_id, "bookmarkId": b["id"], "position": "0",
    }, headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "ERROR"
    assert body["error"] == "[FIREBASE_ERROR]: simulated commit failure"


def test_bookmark_listing_rejects_nested_group_id(client, auth_headers) -> None:
    response = client.get("/bookmarks", params={"groupId": "g1/items"}, headers=auth_headers)

    assert response.json()["status"] == "REQUIRED_FIELDS"
