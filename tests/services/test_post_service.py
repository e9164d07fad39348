"""Tests for the post store and its query engine."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from warble.core.exceptions import InvalidRequestError, NotFoundError
from warble.core.settings import Settings
from warble.models import Hashtag, PostLike
from warble.repositories.pagination import PageRequest
from warble.services import PostService


def test_create_post_extracts_hashtags(post_service, alice) -> None:
    post = post_service.create_post(alice, "Hello #World and #world again #Py_3")

    assert set(post.hashtag_names) == {"world", "py_3"}
    assert post.is_reply is False
    assert post.is_repost is False
    assert post.like_count == post.reply_count == post.repost_count == 0
    assert post.media == []


def test_hashtags_are_shared_between_posts(db_session, post_service, alice, bob) -> None:
    post_service.create_post(alice, "#news one")
    post_service.create_post(bob, "#NEWS two")

    total = db_session.execute(
        select(func.count()).select_from(Hashtag).where(Hashtag.name == "news")
    ).scalar_one()
    assert total == 1


def test_create_reply_increments_parent(post_service, make_post, alice, bob) -> None:
    """A reply points at its parent and bumps reply_count by exactly one."""
    parent = make_post(alice, "parent")

    reply = post_service.create_reply(parent.id, bob, "child", ["https://img.example/1.png"])

    assert reply.is_reply is True
    assert reply.parent_id == parent.id
    assert reply.is_repost is False
    assert reply.media == ["https://img.example/1.png"]
    assert post_service.get_post(parent.id).reply_count == 1


def test_create_repost_increments_original(post_service, make_post, alice, bob) -> None:
    original = make_post(alice, "original")

    repost = post_service.create_repost(original.id, bob, "worth reading")

    assert repost.is_repost is True
    assert repost.original_post_id == original.id
    assert repost.is_reply is False
    assert post_service.get_post(original.id).repost_count == 1
    assert post_service.get_post(original.id).reply_count == 0


def test_reply_and_repost_to_missing_post(post_service, alice) -> None:
    with pytest.raises(NotFoundError):
        post_service.create_reply(uuid.uuid4(), alice, "into the void")
    with pytest.raises(NotFoundError):
        post_service.create_repost(uuid.uuid4(), alice, "into the void")


def test_update_post_rederives_hashtags(post_service, make_post, alice) -> None:
    post = make_post(alice, "old #topic")

    updated = post_service.update_post(post.id, "new #Subject")

    assert updated.content == "new #Subject"
    assert updated.hashtag_names == ["subject"]


def test_delete_post_removes_descendants_and_fixes_counters(
    post_service,
    make_post,
    alice,
    bob,
    carol,
) -> None:
    root = make_post(alice, "root")
    reply = post_service.create_reply(root.id, bob, "reply")
    nested = post_service.create_reply(reply.id, carol, "nested")
    repost_of_reply = post_service.create_repost(reply.id, alice, "boost")
    post_service.like_post(reply.id, carol)
    root_id, reply_id = root.id, reply.id
    doomed = [nested.id, repost_of_reply.id]

    post_service.delete_post(reply_id)

    assert post_service.find_by_id(reply_id) is None
    for post_id in doomed:
        assert post_service.find_by_id(post_id) is None
    assert post_service.get_post(root_id).reply_count == 0


def test_delete_post_removes_likes(db_session, post_service, make_post, alice, bob) -> None:
    post = make_post(alice, "likeable")
    post_service.like_post(post.id, bob)

    post_service.delete_post(post.id)

    assert db_session.execute(select(func.count()).select_from(PostLike)).scalar_one() == 0


def test_delete_missing_post(post_service) -> None:
    with pytest.raises(NotFoundError):
        post_service.delete_post(uuid.uuid4())


def test_like_and_unlike(post_service, make_post, alice, bob) -> None:
    post = make_post(alice)

    liked, created = post_service.like_post(post.id, bob)
    assert created is True
    assert liked.like_count == 1

    liked, created = post_service.like_post(post.id, bob)
    assert created is False
    assert liked.like_count == 1

    assert post_service.unlike_post(post.id, bob).like_count == 0
    with pytest.raises(NotFoundError):
        post_service.unlike_post(post.id, bob)


def test_user_timeline_is_newest_first_across_pages(post_service, make_post, alice, bob) -> None:
    """Created-at never increases from one page to the next."""
    for i in range(5):
        make_post(alice, f"post {i}")
    make_post(bob, "not alice")

    seen = []
    request = PageRequest(page=0, size=2)
    while True:
        page = post_service.get_user_timeline(alice.id, request)
        seen.extend(page.items)
        if not page.has_next:
            break
        request = PageRequest(page=request.page + 1, size=request.size)

    assert [post.content for post in seen] == [f"post {i}" for i in range(4, -1, -1)]
    stamps = [post.created_at for post in seen]
    assert stamps == sorted(stamps, reverse=True)
    assert page.total_pages == 3


def test_home_timeline_only_followed_authors(
    post_service,
    make_post,
    follow,
    alice,
    bob,
    carol,
) -> None:
    follow(bob, alice)
    make_post(alice, "from alice")
    make_post(carol, "from carol")
    make_post(bob, "from bob")
    make_post(alice, "alice again")

    page = post_service.get_home_timeline(bob.id, PageRequest())

    assert [post.content for post in page.items] == ["alice again", "from alice"]
    assert all(post.user_id == alice.id for post in page.items)


def test_home_timeline_can_include_self(db_session, make_post, follow, alice, bob) -> None:
    service = PostService(db_session, Settings(HOME_TIMELINE_INCLUDE_SELF=True))
    follow(bob, alice)
    make_post(alice, "from alice")
    make_post(bob, "from bob")

    page = service.get_home_timeline(bob.id, PageRequest())

    assert [post.content for post in page.items] == ["from bob", "from alice"]


def test_home_timeline_without_follows_is_empty(post_service, make_post, alice, bob) -> None:
    make_post(alice)

    page = post_service.get_home_timeline(bob.id, PageRequest())

    assert page.items == []
    assert page.total_elements == 0
    assert page.total_pages == 0


def test_search_posts(post_service, make_post, alice) -> None:
    make_post(alice, "I am 100% sure")
    make_post(alice, "Sure thing")
    make_post(alice, "nope")

    assert [p.content for p in post_service.search_posts("SURE", PageRequest()).items] == [
        "Sure thing",
        "I am 100% sure",
    ]
    assert [p.content for p in post_service.search_posts("%", PageRequest()).items] == [
        "I am 100% sure",
    ]


def test_trending_orders_by_weighted_engagement(
    post_service,
    make_post,
    alice,
    bob,
    carol,
) -> None:
    """Score is likes + 2 * replies + 3 * reposts; ties go to the newer post."""
    liked = make_post(alice, "liked twice")
    replied = make_post(alice, "replied once")
    reposted = make_post(alice, "reposted once")
    make_post(alice, "ignored")
    post_service.like_post(liked.id, bob)
    post_service.like_post(liked.id, carol)
    post_service.create_reply(replied.id, bob, "a reply")
    post_service.create_repost(reposted.id, carol, "a repost")

    page = post_service.get_trending_posts(PageRequest(page=0, size=3))

    assert [post.content for post in page.items] == [
        "reposted once",
        "replied once",
        "liked twice",
    ]


def test_posts_by_hashtag(post_service, make_post, alice) -> None:
    make_post(alice, "hello #world")
    make_post(alice, "hello #World, again")
    make_post(alice, "hello #other")

    assert len(post_service.get_posts_by_hashtag("WORLD", PageRequest()).items) == 2
    assert len(post_service.get_posts_by_hashtag("#world", PageRequest()).items) == 2
    assert post_service.get_posts_by_hashtag("missing", PageRequest()).items == []
    assert post_service.get_posts_by_hashtag("  ", PageRequest()).total_elements == 0


def test_get_replies(post_service, make_post, alice, bob) -> None:
    parent = make_post(alice, "question")
    post_service.create_reply(parent.id, bob, "first answer")
    post_service.create_reply(parent.id, alice, "follow-up")
    make_post(bob, "unrelated")

    page = post_service.get_replies(parent.id, PageRequest())

    assert page.total_elements == 2
    assert all(post.parent_id == parent.id for post in page.items)
    with pytest.raises(NotFoundError):
        post_service.get_replies(uuid.uuid4(), PageRequest())


def test_page_request_rejects_bad_bounds() -> None:
    with pytest.raises(InvalidRequestError):
        PageRequest(page=-1, size=10)
    with pytest.raises(InvalidRequestError):
        PageRequest(page=0, size=0)


def test_post_consisting_of_one_long_tag(post_service, alice) -> None:
    tag = "a" * 150

    post = post_service.create_post(alice, f"#{tag}")

    assert post.hashtag_names == [tag]
    assert len(post_service.get_posts_by_hashtag(tag, PageRequest()).items) == 1
