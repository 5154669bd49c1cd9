"""
Read-only queries over the post collection.

Status filters are evaluated against the engine clock (``now`` is passed to
the database as a bound value), never against a stored field.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFound
from ..crud import post as post_crud
from ..db.models.post import Post, Topic
from .lifecycle import PostStatus, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredPost:
    post: Post
    interest: int


def interest_score(post: Post) -> int:
    """Likes + dislikes + comments."""
    return len(post.likes) + len(post.dislikes) + len(post.comments)


def pick_top_interest(posts: Iterable[Post]) -> Optional[ScoredPost]:
    """
    Return the post with the highest interest score.

    Ties keep the first post seen; a later post must score strictly higher
    to replace it.
    """
    top: Optional[ScoredPost] = None
    for post in posts:
        score = interest_score(post)
        if top is None or score > top.interest:
            top = ScoredPost(post=post, interest=score)
    return top


def known_topic(topic) -> Optional[Topic]:
    """The ``Topic`` named by ``topic``, or None when it names no topic."""
    if isinstance(topic, Topic):
        return topic
    try:
        return Topic(topic)
    except ValueError:
        return None


def parse_post_id(post_id) -> UUID:
    if isinstance(post_id, UUID):
        return post_id
    try:
        return UUID(str(post_id))
    except ValueError:
        raise NotFound("Post not found")


async def get_by_id(db: AsyncSession, post_id) -> Post:
    """
    Raises:
        NotFound: If no post has this id, including malformed ids
    """
    post = await post_crud.get_post(db, parse_post_id(post_id))
    if post is None:
        raise NotFound("Post not found")
    return post


async def list_by_status_and_topic(
    db: AsyncSession,
    status: PostStatus,
    topic: Union[Topic, str, None] = None,
    now: Optional[datetime] = None,
) -> List[Post]:
    """
    Live posts newest first, or Expired posts most-recently-expired first.

    A blank ``topic`` means no filter. A topic outside the enumeration
    matches no post.
    """
    if now is None:
        now = utcnow()
    if topic:
        topic = known_topic(topic)
        if topic is None:
            return []
    else:
        topic = None
    if status == PostStatus.LIVE:
        return await post_crud.find_posts(
            db,
            expires_after=now,
            topic=topic,
            order_by=(Post.created_at.desc(), Post.id),
        )
    return await post_crud.find_posts(
        db,
        expires_at_or_before=now,
        topic=topic,
        order_by=(Post.expires_at.desc(), Post.id),
    )


async def list_live_by_topic(
    db: AsyncSession,
    topic: Union[Topic, str],
    now: Optional[datetime] = None,
) -> List[Post]:
    """Live posts in ``topic``, oldest first. Unknown topics match nothing."""
    if now is None:
        now = utcnow()
    topic = known_topic(topic)
    if topic is None:
        return []
    return await post_crud.find_posts(
        db,
        expires_after=now,
        topic=topic,
        order_by=(Post.created_at.asc(), Post.id),
    )


async def top_interest(
    db: AsyncSession,
    topic: Union[Topic, str, None] = None,
    now: Optional[datetime] = None,
) -> ScoredPost:
    """
    The most engaged Live post, optionally within a topic.

    Posts are scanned in creation order, so on a tie the oldest post wins.

    Raises:
        NotFound: If no Live post matches
    """
    if now is None:
        now = utcnow()
    label = topic.value if isinstance(topic, Topic) else (topic or None)
    selected = known_topic(topic) if topic else None
    top = None
    if not topic or selected is not None:
        posts = await post_crud.find_posts(
            db,
            expires_after=now,
            topic=selected,
            order_by=(Post.created_at.asc(), Post.id),
        )
        top = pick_top_interest(posts)
    if top is None:
        logger.info(f"[POSTS] No active posts for top-interest (topic={label})")
        raise NotFound("No active posts found for this topic", topic=label)
    return top
