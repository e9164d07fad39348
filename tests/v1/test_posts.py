"""Tests for the post endpoints."""

from __future__ import annotations

import uuid

from fastapi import status


def _create(client, username: str, content: str, **extra) -> dict:
    r = client.post(f"/api/v1/posts/user/{username}", json={"content": content, **extra})
    assert r.status_code == status.HTTP_201_CREATED, r.text
    return r.json()


def test_create_and_fetch_post(client, alice) -> None:
    post = _create(client, "alice", "first! #Intro", media=["https://img.example/a.png"])

    assert post["username"] == "alice"
    assert post["user_display_name"] == "Alice"
    assert post["hashtags"] == ["intro"]
    assert post["media"] == ["https://img.example/a.png"]
    assert post["is_reply"] is False
    assert post["parent_id"] is None

    r = client.get(f"/api/v1/posts/{post['id']}")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["content"] == "first! #Intro"


def test_create_post_validation(client, alice) -> None:
    r = client.post("/api/v1/posts/user/alice", json={"content": "x" * 281})
    assert r.status_code == status.HTTP_400_BAD_REQUEST

    r = client.post("/api/v1/posts/user/alice", json={"content": "   "})
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_create_post_for_unknown_user(client) -> None:
    r = client.post("/api/v1/posts/user/ghost", json={"content": "boo"})
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_get_missing_post(client) -> None:
    missing = uuid.uuid4()
    r = client.get(f"/api/v1/posts/{missing}")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json()["message"] == f"Post not found with id : '{missing}'"

    r = client.get("/api/v1/posts/not-a-uuid")
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_reply_and_repost_update_counters(client, alice, bob) -> None:
    parent = _create(client, "alice", "what do you think?")

    r = client.post(f"/api/v1/posts/{parent['id']}/reply/bob", json={"content": "yes"})
    assert r.status_code == status.HTTP_201_CREATED
    reply = r.json()
    assert reply["is_reply"] is True
    assert reply["parent_id"] == parent["id"]

    r = client.post(f"/api/v1/posts/{parent['id']}/repost/bob", json={"content": "boost"})
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["original_post_id"] == parent["id"]

    parent_now = client.get(f"/api/v1/posts/{parent['id']}").json()
    assert parent_now["reply_count"] == 1
    assert parent_now["repost_count"] == 1

    r = client.get(f"/api/v1/posts/{parent['id']}/replies")
    assert [p["id"] for p in r.json()["items"]] == [reply["id"]]


def test_reply_to_missing_parent(client, bob) -> None:
    r = client.post(f"/api/v1/posts/{uuid.uuid4()}/reply/bob", json={"content": "hello?"})
    assert r.status_code == status.HTTP_404_NOT_FOUND

    r = client.get(f"/api/v1/posts/{uuid.uuid4()}/replies")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_update_and_delete_post(client, alice) -> None:
    post = _create(client, "alice", "draft #one")

    r = client.put(f"/api/v1/posts/{post['id']}", json={"content": "final #two"})
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["hashtags"] == ["two"]

    r = client.delete(f"/api/v1/posts/{post['id']}")
    assert r.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post['id']}").status_code == status.HTTP_404_NOT_FOUND
    assert client.delete(f"/api/v1/posts/{post['id']}").status_code == status.HTTP_404_NOT_FOUND


def test_like_and_unlike(client, alice, bob) -> None:
    post = _create(client, "alice", "like me")

    r = client.post(f"/api/v1/posts/{post['id']}/like/bob")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["created"] is True
    assert r.json()["like_count"] == 1

    r = client.post(f"/api/v1/posts/{post['id']}/like/bob")
    assert r.json()["created"] is False
    assert r.json()["like_count"] == 1

    r = client.delete(f"/api/v1/posts/{post['id']}/like/bob")
    assert r.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post['id']}").json()["like_count"] == 0

    r = client.delete(f"/api/v1/posts/{post['id']}/like/bob")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_search_and_trending(client, post_service, make_post, alice, bob) -> None:
    quiet = make_post(alice, "quiet coffee")
    loud = make_post(alice, "loud coffee")
    post_service.like_post(quiet.id, bob)
    post_service.create_repost(loud.id, bob, "so loud")

    r = client.get("/api/v1/posts/search", params={"query": "COFFEE"})
    assert [p["content"] for p in r.json()["items"]] == ["loud coffee", "quiet coffee"]

    r = client.get("/api/v1/posts/trending", params={"size": 2})
    assert [p["content"] for p in r.json()["items"]] == ["loud coffee", "quiet coffee"]
