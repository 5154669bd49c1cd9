"""
CRUD operations for posts.
"""
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from piazza.db.models.post import Post, PostTopic, Topic
from piazza.db.models.user import User


async def create_post(
    db: AsyncSession,
    owner: User,
    title: str,
    body: str,
    topics: Sequence[Topic],
    expires_at: datetime,
    created_at: Optional[datetime] = None,
) -> Post:
    """
    Create a new post owned by ``owner``.

    Args:
        db: Database session
        owner: The creating user; their current name is snapshotted
        title: Post title
        body: Post body
        topics: Topics, already de-duplicated
        expires_at: Absolute expiry time (naive UTC)
        created_at: Creation time the lifetime was measured from

    Returns:
        Post: Created post
    """
    db_post = Post(
        title=title,
        body=body,
        owner_id=owner.id,
        owner_name=owner.name,
        expires_at=expires_at,
        topic_links=[PostTopic(topic=topic) for topic in topics],
        reactions=[],
        comments=[],
    )
    if created_at is not None:
        db_post.created_at = created_at
        db_post.updated_at = created_at
    db.add(db_post)
    # Flush to send changes to DB within the transaction
    await db.flush()
    return db_post


async def get_post(db: AsyncSession, post_id: UUID) -> Optional[Post]:
    """
    Get a post by ID.

    Returns:
        Optional[Post]: Post if found, None otherwise
    """
    result = await db.execute(select(Post).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def get_post_for_update(db: AsyncSession, post_id: UUID) -> Optional[Post]:
    """
    Get a post by ID and lock its row until the transaction ends.

    Engagement writes go through here so read-modify-write on one post is
    serialized; other posts are unaffected.
    """
    result = await db.execute(
        select(Post)
        .where(Post.id == post_id)
        .with_for_update(of=Post)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_posts(
    db: AsyncSession,
    *,
    expires_after: Optional[datetime] = None,
    expires_at_or_before: Optional[datetime] = None,
    topic: Optional[Topic] = None,
    order_by: Sequence = (),
) -> List[Post]:
    """
    Find posts by expiry window and topic.

    Args:
        db: Database session
        expires_after: Only posts with ``expires_at > expires_after``
        expires_at_or_before: Only posts with ``expires_at <= expires_at_or_before``
        topic: Only posts tagged with this topic
        order_by: ORDER BY clauses, applied in order

    Returns:
        List[Post]: Matching posts with topics, reactions and comments loaded
    """
    query = select(Post)
    if expires_after is not None:
        query = query.where(Post.expires_at > expires_after)
    if expires_at_or_before is not None:
        query = query.where(Post.expires_at <= expires_at_or_before)
    if topic is not None:
        query = query.where(Post.topic_links.any(PostTopic.topic == topic))
    if order_by:
        query = query.order_by(*order_by)
    result = await db.execute(query)
    return list(result.scalars().all())
