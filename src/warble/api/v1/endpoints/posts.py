"""Post-related endpoints for the Warble API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, Response, status

from warble.api.v1.dependencies import (
    PageRequestDep,
    PostServiceDep,
    UserServiceDep,
)
from warble.schemas.common import PageResponse
from warble.schemas.post import LikeResponse, PostCreate, PostResponse, PostUpdate
from warble.services.mapping import to_page_out, to_post_out

router = APIRouter(prefix="/posts", tags=["posts"])


# Fixed paths are registered before "/{post_id}" so they are matched first.


@router.get("/search", response_model=PageResponse[PostResponse])
def search_posts(
    posts: PostServiceDep,
    page_request: PageRequestDep,
    query: str = Query(..., description="Substring to look for in post content"),
) -> PageResponse:
    """Search post content, ignoring case.

    Args:
        posts: Post service
        page_request: Page number and size
        query: Substring to look for

    Returns:
        One page of matching posts, newest first
    """
    return to_page_out(posts.search_posts(query, page_request), to_post_out)


@router.get("/trending", response_model=PageResponse[PostResponse])
def trending_posts(posts: PostServiceDep, page_request: PageRequestDep) -> PageResponse:
    """Posts ranked by weighted likes, replies and reposts."""
    return to_page_out(posts.get_trending_posts(page_request), to_post_out)


@router.get("/hashtag/{hashtag}", response_model=PageResponse[PostResponse])
def posts_by_hashtag(
    hashtag: str,
    posts: PostServiceDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """Get posts tagged with ``hashtag``.

    Args:
        hashtag: Tag name, with or without the leading ``#``, any case
        posts: Post service
        page_request: Page number and size

    Returns:
        One page of tagged posts, empty for an unknown tag
    """
    return to_page_out(posts.get_posts_by_hashtag(hashtag, page_request), to_post_out)


@router.get("/user/{username}", response_model=PageResponse[PostResponse])
def user_timeline(
    username: str,
    posts: PostServiceDep,
    users: UserServiceDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """Get posts written by ``username``, newest first.

    Args:
        username: Author whose posts to list
        posts: Post service
        users: User directory service
        page_request: Page number and size

    Returns:
        One page of the author's posts

    Raises:
        NotFoundError: If no such user exists (404)
    """
    user = users.get_by_username(username)
    return to_page_out(posts.get_user_timeline(user.id, page_request), to_post_out)


@router.post(
    "/user/{username}",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_post(
    username: str,
    payload: PostCreate,
    posts: PostServiceDep,
    users: UserServiceDep,
) -> PostResponse:
    """Publish a top-level post for ``username``.

    Args:
        username: Author of the post
        payload: Content and optional media URLs
        posts: Post service
        users: User directory service

    Returns:
        The created post with its extracted hashtags

    Raises:
        NotFoundError: If no such user exists (404)
    """
    author = users.get_by_username(username)
    return to_post_out(posts.create_post(author, payload.content, payload.media))


@router.get("/home/{username}", response_model=PageResponse[PostResponse])
def home_timeline(
    username: str,
    posts: PostServiceDep,
    users: UserServiceDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """Get posts from the accounts ``username`` follows, newest first.

    Args:
        username: Reader of the timeline
        posts: Post service
        users: User directory service
        page_request: Page number and size

    Returns:
        One page of followed authors' posts

    Raises:
        NotFoundError: If no such user exists (404)
    """
    user = users.get_by_username(username)
    return to_page_out(posts.get_home_timeline(user.id, page_request), to_post_out)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: uuid.UUID, posts: PostServiceDep) -> PostResponse:
    """Get a specific post by ID.

    Args:
        post_id: ID of the post to retrieve
        posts: Post service

    Returns:
        The post

    Raises:
        NotFoundError: If the post does not exist (404)
    """
    return to_post_out(posts.get_post(post_id))


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: uuid.UUID,
    payload: PostUpdate,
    posts: PostServiceDep,
) -> PostResponse:
    """Replace the content of a post; hashtags follow the new text.

    Args:
        post_id: ID of the post to edit
        payload: New content
        posts: Post service

    Returns:
        The updated post

    Raises:
        NotFoundError: If the post does not exist (404)
    """
    return to_post_out(posts.update_post(post_id, payload.content))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: uuid.UUID, posts: PostServiceDep) -> Response:
    """Delete a post together with its replies and reposts.

    Raises:
        NotFoundError: If the post does not exist (404)
    """
    posts.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/replies", response_model=PageResponse[PostResponse])
def list_replies(
    post_id: uuid.UUID,
    posts: PostServiceDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """Direct replies to a post, newest first."""
    return to_page_out(posts.get_replies(post_id, page_request), to_post_out)


@router.post(
    "/{parent_id}/reply/{username}",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
def reply_to_post(
    parent_id: uuid.UUID,
    username: str,
    payload: PostCreate,
    posts: PostServiceDep,
    users: UserServiceDep,
) -> PostResponse:
    """Reply to a post as ``username``.

    Args:
        parent_id: ID of the post being answered
        username: Author of the reply
        payload: Content and optional media URLs
        posts: Post service
        users: User directory service

    Returns:
        The reply; the parent's reply count goes up by one

    Raises:
        NotFoundError: If the parent post or the user does not exist (404)
    """
    author = users.get_by_username(username)
    return to_post_out(posts.create_reply(parent_id, author, payload.content, payload.media))


@router.post(
    "/{original_id}/repost/{username}",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
def repost(
    original_id: uuid.UUID,
    username: str,
    payload: PostCreate,
    posts: PostServiceDep,
    users: UserServiceDep,
) -> PostResponse:
    """Repost a post with a comment as ``username``.

    Args:
        original_id: ID of the post being shared
        username: Author of the repost
        payload: Comment and optional media URLs
        posts: Post service
        users: User directory service

    Returns:
        The repost; the original's repost count goes up by one

    Raises:
        NotFoundError: If the original post or the user does not exist (404)
    """
    author = users.get_by_username(username)
    return to_post_out(posts.create_repost(original_id, author, payload.content, payload.media))


@router.post("/{post_id}/like/{username}", response_model=LikeResponse)
def like_post(
    post_id: uuid.UUID,
    username: str,
    posts: PostServiceDep,
    users: UserServiceDep,
) -> LikeResponse:
    """Like a post; liking it again changes nothing.

    Args:
        post_id: ID of the post to like
        username: User giving the like
        posts: Post service
        users: User directory service

    Returns:
        The like with the post's current like count

    Raises:
        NotFoundError: If the post or the user does not exist (404)
    """
    user = users.get_by_username(username)
    post, created = posts.like_post(post_id, user)
    return LikeResponse(
        post_id=post.id,
        username=user.username,
        created=created,
        like_count=post.like_count,
    )


@router.delete("/{post_id}/like/{username}", status_code=status.HTTP_204_NO_CONTENT)
def unlike_post(
    post_id: uuid.UUID,
    username: str,
    posts: PostServiceDep,
    users: UserServiceDep,
) -> Response:
    """Withdraw a like.

    Raises:
        NotFoundError: If the post, the user or the like does not exist (404)
    """
    user = users.get_by_username(username)
    posts.unlike_post(post_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
