"""
API endpoints for post-related operations.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from piazza.auth.dependencies import get_current_user
from piazza.core.config import Settings
from piazza.core.errors import NotFound
from piazza.crud import post as post_crud
from piazza.db.dependencies import get_app_settings, get_db
from piazza.db.models.user import User
from piazza.db.session import commit
from piazza.posts import engagement, queries
from piazza.posts.lifecycle import PostStatus, compute_expires_at, time_left_seconds, utcnow
from piazza.schemas.post import (
    CommentCreate,
    CommentEntry,
    CommentsResponse,
    PostCreate,
    PostCreatedResponse,
    PostDetailResponse,
    PostListResponse,
    PostRead,
    PostSummary,
    ReactionResponse,
    TopicBrowseResponse,
    TopInterestResponse,
)

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
)


@router.get("", response_model=PostListResponse)
async def list_live_posts(
    topic: Optional[str] = Query(None, description="Only posts tagged with this topic"),
    db: AsyncSession = Depends(get_db),
):
    """Live posts, newest first."""
    now = utcnow()
    posts = await queries.list_by_status_and_topic(db, PostStatus.LIVE, topic, now)
    return PostListResponse(posts=[PostRead.from_post(p, now) for p in posts])


@router.get("/expired", response_model=PostListResponse)
async def list_expired_posts(
    topic: Optional[str] = Query(None, description="Only posts tagged with this topic"),
    db: AsyncSession = Depends(get_db),
):
    """Expired posts, most recently expired first."""
    now = utcnow()
    posts = await queries.list_by_status_and_topic(db, PostStatus.EXPIRED, topic, now)
    return PostListResponse(posts=[PostRead.from_post(p, now) for p in posts])


@router.post("", response_model=PostCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create a post owned by the caller.

    The lifetime falls back to DEFAULT_POST_LIFETIME_MINUTES when
    ``expiresInMinutes`` is missing, non-numeric or not positive.
    """
    now = utcnow()
    expires_at = compute_expires_at(
        post_in.expiresInMinutes,
        now=now,
        default=settings.DEFAULT_POST_LIFETIME_MINUTES,
    )
    post = await post_crud.create_post(
        db,
        owner=current_user,
        title=post_in.title,
        body=post_in.body,
        topics=post_in.topics,
        expires_at=expires_at,
        created_at=now,
    )
    await commit(db)

    logger.info(f"[POSTS] User {current_user.id} created post {post.id} expiring at {expires_at.isoformat()}")
    return PostCreatedResponse(post=PostRead.from_post(post, now))


@router.get("/topic/{topic}", response_model=TopicBrowseResponse)
async def browse_topic(
    topic: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Browse the live posts of a topic, oldest first."""
    now = utcnow()
    posts = await queries.list_live_by_topic(db, topic, now)
    return TopicBrowseResponse(
        topic=topic,
        count=len(posts),
        posts=[PostSummary.from_post(p, now) for p in posts],
    )


@router.get("/top-interest", response_model=TopInterestResponse)
async def get_top_interest(
    topic: Optional[str] = Query(None, description="Restrict to this topic"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    The live post with the most likes + dislikes + comments.

    Raises:
        NotFound: 404 if no live post matches
    """
    now = utcnow()
    top = await queries.top_interest(db, topic, now)
    return TopInterestResponse(
        topic=topic or None,
        interestScore=top.interest,
        post=PostRead.from_post(top.post, now),
    )


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """A single post with its time left and status."""
    now = utcnow()
    post = await queries.get_by_id(db, post_id)
    return PostDetailResponse(
        post=PostRead.from_post(post, now),
        timeLeftSeconds=time_left_seconds(post.expires_at, now),
        status=post.status_at(now),
    )


async def _load_for_update(db: AsyncSession, post_id: str):
    post = await post_crud.get_post_for_update(db, queries.parse_post_id(post_id))
    if post is None:
        raise NotFound("Post not found")
    return post


@router.post("/{post_id}/like", response_model=ReactionResponse)
async def like_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Like a post, replacing any dislike by the caller."""
    post = await _load_for_update(db, post_id)
    counts = engagement.like(post, current_user)
    await commit(db)

    logger.info(f"[POSTS] User {current_user.id} liked post {post.id}")
    return ReactionResponse(message="Like registered", likes=counts.likes, dislikes=counts.dislikes)


@router.post("/{post_id}/dislike", response_model=ReactionResponse)
async def dislike_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Dislike a post, replacing any like by the caller."""
    post = await _load_for_update(db, post_id)
    counts = engagement.dislike(post, current_user)
    await commit(db)

    logger.info(f"[POSTS] User {current_user.id} disliked post {post.id}")
    return ReactionResponse(message="Dislike registered", likes=counts.likes, dislikes=counts.dislikes)


@router.post("/{post_id}/comments", response_model=CommentsResponse, status_code=status.HTTP_201_CREATED)
async def comment_on_post(
    post_id: str,
    comment_in: CommentCreate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Append a comment. Owners may comment on their own posts."""
    post = await _load_for_update(db, post_id)
    comments = engagement.comment(post, current_user, comment_in.text)
    await commit(db)

    logger.info(f"[POSTS] User {current_user.id} commented on post {post.id}")
    return CommentsResponse(comments=[CommentEntry.from_comment(c) for c in comments])
