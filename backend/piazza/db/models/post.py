"""
Post model and its engagement sub-records.
"""
import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Column, String, Integer, Text, ForeignKey, DateTime, Enum, Uuid, UniqueConstraint
)
from sqlalchemy.orm import relationship

from ..base import Base, UUIDMixin, TimestampMixin
from ...posts.lifecycle import PostStatus, derive_status, utcnow


class Topic(str, enum.Enum):
    POLITICS = "Politics"
    HEALTH = "Health"
    SPORT = "Sport"
    TECH = "Tech"


class ReactionKind(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Post(Base, UUIDMixin, TimestampMixin):
    """
    A time-limited board post.

    ``status`` is derived from ``expires_at`` on every read and has no column.
    ``owner_name`` is a snapshot of the owner's name at creation time.
    """
    __tablename__ = "posts"

    title = Column(Text, nullable=False)
    body = Column(Text, nullable=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    owner_name = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    # Relationships
    topic_links = relationship(
        "PostTopic",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostTopic.id",
        lazy="selectin",
    )
    reactions = relationship(
        "PostReaction",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by=lambda: [PostReaction.created_at, PostReaction.id],
        lazy="selectin",
    )
    comments = relationship(
        "PostComment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
        lazy="selectin",
    )

    @property
    def topics(self) -> List[Topic]:
        return [link.topic for link in self.topic_links]

    @property
    def likes(self) -> List["PostReaction"]:
        """Like entries, oldest first. A switched reaction counts as new."""
        return [r for r in self.reactions if r.kind == ReactionKind.LIKE]

    @property
    def dislikes(self) -> List["PostReaction"]:
        return [r for r in self.reactions if r.kind == ReactionKind.DISLIKE]

    def status_at(self, now: Optional[datetime] = None) -> PostStatus:
        return derive_status(self.expires_at, now)

    @property
    def status(self) -> PostStatus:
        return self.status_at()


class PostTopic(Base):
    """One row per (post, topic) so topic filters are an indexed lookup."""
    __tablename__ = "post_topics"
    __table_args__ = (UniqueConstraint("post_id", "topic"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    topic = Column(
        Enum(Topic, name="topic", native_enum=False, values_callable=_enum_values),
        nullable=False,
        index=True,
    )

    post = relationship("Post", back_populates="topic_links")


class PostReaction(Base):
    """
    A like or dislike. Unique per (post, user): a user holds at most one
    sentiment per post, so switching updates ``kind`` in place.
    """
    __tablename__ = "post_reactions"
    __table_args__ = (UniqueConstraint("post_id", "user_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    name = Column(String(255))
    kind = Column(
        Enum(ReactionKind, name="reaction_kind", native_enum=False, values_callable=_enum_values),
        nullable=False,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)

    post = relationship("Post", back_populates="reactions")


class PostComment(Base):
    """Append-only. Comments are never edited or removed."""
    __tablename__ = "post_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    name = Column(String(255))
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    post = relationship("Post", back_populates="comments")
