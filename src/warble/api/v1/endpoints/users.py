"""User directory and follow-graph endpoints for the Warble API."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Query, Response, status

from warble.api.v1.dependencies import (
    PageRequestDep,
    SocialGraphDep,
    UserServiceDep,
)
from warble.models import User
from warble.repositories.pagination import Page
from warble.schemas.common import AvailabilityResponse, PageResponse
from warble.schemas.user import FollowResponse, UserCreate, UserResponse, UserUpdate
from warble.services import SocialGraphService
from warble.services.mapping import to_page_out, to_user_out

router = APIRouter(prefix="/users", tags=["users"])


def _counted_mapper(graph: SocialGraphService, users: Sequence[User]):
    counts = graph.counts_for(user.id for user in users)
    return lambda user: to_user_out(user, *counts.get(user.id, (0, 0)))


def _with_counts(graph: SocialGraphService, users: Sequence[User]) -> list[UserResponse]:
    mapper = _counted_mapper(graph, users)
    return [mapper(user) for user in users]


def _page_with_counts(graph: SocialGraphService, page: Page[User]) -> PageResponse:
    return to_page_out(page, _counted_mapper(graph, page.items))


def _single(graph: SocialGraphService, user: User) -> UserResponse:
    return to_user_out(
        user,
        followers_count=graph.count_followers(user.id),
        following_count=graph.count_following(user.id),
    )


@router.get("", response_model=PageResponse[UserResponse])
def list_users(
    users: UserServiceDep,
    graph: SocialGraphDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """List every account, oldest first.

    Args:
        users: User directory service
        graph: Social graph service, used for follower counts
        page_request: Page number and size

    Returns:
        One page of users with follower and following counts
    """
    return _page_with_counts(graph, users.list_users(page_request))


@router.get("/search", response_model=list[UserResponse])
def search_users(
    users: UserServiceDep,
    graph: SocialGraphDep,
    query: str = Query(..., description="Substring of a username or display name"),
) -> list[UserResponse]:
    """Search usernames and display names, ignoring case.

    Args:
        users: User directory service
        graph: Social graph service, used for follower counts
        query: Substring to look for

    Returns:
        Matching users ordered by username
    """
    return _with_counts(graph, users.search_users(query))


@router.get("/check-username", response_model=AvailabilityResponse)
def check_username(
    users: UserServiceDep,
    username: str = Query(..., min_length=1),
) -> AvailabilityResponse:
    """Report whether ``username`` is still free."""
    return AvailabilityResponse(available=users.is_username_available(username))


@router.get("/check-email", response_model=AvailabilityResponse)
def check_email(
    users: UserServiceDep,
    email: str = Query(..., min_length=1),
) -> AvailabilityResponse:
    """Report whether ``email`` is not yet registered."""
    return AvailabilityResponse(available=users.is_email_available(email))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, users: UserServiceDep) -> UserResponse:
    """Register a new account.

    Args:
        payload: Username, email, password and optional profile fields
        users: User directory service

    Returns:
        The created user with zero follow counts

    Raises:
        ConflictError: If the username or email is already in use (409)
    """
    return to_user_out(users.create_user(payload))


@router.get("/{username}", response_model=UserResponse)
def get_user(username: str, users: UserServiceDep, graph: SocialGraphDep) -> UserResponse:
    """Get one account by username.

    Args:
        username: Username to look up, any case
        users: User directory service
        graph: Social graph service, used for follower counts

    Returns:
        The user with follower and following counts

    Raises:
        NotFoundError: If no such user exists (404)
    """
    return _single(graph, users.get_by_username(username))


@router.put("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    payload: UserUpdate,
    users: UserServiceDep,
    graph: SocialGraphDep,
) -> UserResponse:
    """Update profile fields of an account.

    Fields omitted from the body keep their stored value.

    Args:
        username: Account to update
        payload: Fields to change
        users: User directory service
        graph: Social graph service, used for follower counts

    Returns:
        The updated user

    Raises:
        NotFoundError: If no such user exists (404)
    """
    user = users.get_by_username(username)
    return _single(graph, users.update_user(user.id, payload))


@router.delete("/{username}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(username: str, users: UserServiceDep) -> Response:
    """Delete an account with its posts, likes and follow edges.

    Raises:
        NotFoundError: If no such user exists (404)
    """
    user = users.get_by_username(username)
    users.delete_user(user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{username}/following/{target}",
    response_model=FollowResponse,
    status_code=status.HTTP_201_CREATED,
)
def follow_user(
    username: str,
    target: str,
    response: Response,
    users: UserServiceDep,
    graph: SocialGraphDep,
) -> FollowResponse:
    """Make ``username`` follow ``target``.

    Args:
        username: The follower
        target: The account to follow
        response: Outgoing response, downgraded to 200 for an existing edge
        users: User directory service
        graph: Social graph service

    Returns:
        The edge and whether this call created it

    Raises:
        NotFoundError: If either user does not exist (404)
        InvalidRequestError: If a user tries to follow themselves (400)
    """
    follower = users.get_by_username(username)
    followed = users.get_by_username(target)
    created = graph.follow(follower.id, followed.id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return FollowResponse(follower=follower.username, following=followed.username, created=created)


@router.delete("/{username}/following/{target}", status_code=status.HTTP_204_NO_CONTENT)
def unfollow_user(
    username: str,
    target: str,
    users: UserServiceDep,
    graph: SocialGraphDep,
) -> Response:
    """Remove the edge from ``username`` to ``target``.

    Raises:
        NotFoundError: If either user or the edge does not exist (404)
    """
    follower = users.get_by_username(username)
    followed = users.get_by_username(target)
    graph.unfollow(follower.id, followed.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{username}/followers", response_model=PageResponse[UserResponse])
def list_followers(
    username: str,
    users: UserServiceDep,
    graph: SocialGraphDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """List accounts following ``username``, most recent follower first.

    Args:
        username: Account whose followers to list
        users: User directory service
        graph: Social graph service
        page_request: Page number and size

    Returns:
        One page of followers

    Raises:
        NotFoundError: If no such user exists (404)
    """
    user = users.get_by_username(username)
    return _page_with_counts(graph, graph.list_followers(user.id, page_request))


@router.get("/{username}/following", response_model=PageResponse[UserResponse])
def list_following(
    username: str,
    users: UserServiceDep,
    graph: SocialGraphDep,
    page_request: PageRequestDep,
) -> PageResponse:
    """Accounts ``username`` follows, most recently followed first."""
    user = users.get_by_username(username)
    return _page_with_counts(graph, graph.list_following(user.id, page_request))
