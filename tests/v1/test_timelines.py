"""End-to-end feed scenarios through the HTTP API."""

from __future__ import annotations

from fastapi import status


def test_hashtag_feed(client, alice) -> None:
    """A tagged post is found by its tag and not by any other."""
    r = client.post("/api/v1/posts/user/alice", json={"content": "hello #world"})
    assert r.status_code == status.HTTP_201_CREATED
    post = r.json()
    assert set(post["hashtags"]) == {"world"}

    r = client.get("/api/v1/posts/hashtag/world")
    assert post["id"] in [p["id"] for p in r.json()["items"]]

    r = client.get("/api/v1/posts/hashtag/WORLD")
    assert post["id"] in [p["id"] for p in r.json()["items"]]

    r = client.get("/api/v1/posts/hashtag/other")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["items"] == []


def test_home_timeline_follows_the_graph(client, alice, bob, carol) -> None:
    """Bob follows Alice and sees her post; Carol does not follow and does not."""
    r = client.post("/api/v1/users/bob/following/alice")
    assert r.status_code == status.HTTP_201_CREATED

    r = client.post("/api/v1/posts/user/alice", json={"content": "news from alice"})
    post_id = r.json()["id"]

    r = client.get("/api/v1/posts/home/bob")
    assert r.status_code == status.HTTP_200_OK
    assert post_id in [p["id"] for p in r.json()["items"]]

    r = client.get("/api/v1/posts/home/carol")
    assert post_id not in [p["id"] for p in r.json()["items"]]
    assert r.json()["total_elements"] == 0


def test_home_timeline_excludes_unfollowed_authors(client, follow, make_post, alice, bob, carol) -> None:
    follow(bob, alice)
    for i in range(3):
        make_post(alice, f"alice {i}")
        make_post(carol, f"carol {i}")
    make_post(bob, "bob himself")

    items = client.get("/api/v1/posts/home/bob", params={"size": 50}).json()["items"]

    assert [p["content"] for p in items] == ["alice 2", "alice 1", "alice 0"]
    assert {p["username"] for p in items} == {"alice"}


def test_user_timeline_pages_are_ordered(client, make_post, alice) -> None:
    for i in range(5):
        make_post(alice, f"entry {i}")

    stamps = []
    for page in range(3):
        r = client.get("/api/v1/posts/user/alice", params={"page": page, "size": 2})
        body = r.json()
        stamps.extend(p["created_at"] for p in body["items"])
        assert body["total_pages"] == 3

    assert len(stamps) == 5
    assert stamps == sorted(stamps, reverse=True)


def test_registration_scenario(client) -> None:
    payload = {"username": "alice", "email": "a@x.com", "password": "longenough"}

    assert client.post("/api/v1/users", json=payload).status_code == status.HTTP_201_CREATED
    assert client.get(
        "/api/v1/users/check-username", params={"username": "alice"}
    ).json()["available"] is False

    r = client.post("/api/v1/users", json=payload)
    assert r.status_code == status.HTTP_409_CONFLICT

    matches = client.get("/api/v1/users/search", params={"query": "alice"}).json()
    assert [u["username"] for u in matches] == ["alice"]
