"""
Pydantic schemas for posts.
"""
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from piazza.db.models.post import Post, PostComment, PostReaction, Topic
from piazza.posts.lifecycle import PostStatus, as_utc, time_left_seconds


class PostCreate(BaseModel):
    """Request body for creating a post."""
    title: str = Field(..., description="Post title")
    body: str = Field(..., description="Post body")
    topics: List[Topic] = Field(..., min_length=1, description="At least one of Politics, Health, Sport, Tech")
    expiresInMinutes: Optional[Any] = Field(
        None,
        description="Lifetime in minutes. Missing, non-numeric or non-positive values use the default (5).",
    )

    @field_validator("title", "body")
    def strip_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("topics")
    def dedupe_topics(cls, v: List[Topic]) -> List[Topic]:
        return list(dict.fromkeys(v))


class CommentCreate(BaseModel):
    text: Optional[str] = Field(None, description="The text content of the comment")


class ReactionEntry(BaseModel):
    user: UUID
    name: Optional[str] = None
    createdAt: datetime

    @classmethod
    def from_reaction(cls, reaction: PostReaction) -> "ReactionEntry":
        return cls(user=reaction.user_id, name=reaction.name, createdAt=as_utc(reaction.created_at))


class CommentEntry(BaseModel):
    user: UUID
    name: Optional[str] = None
    text: str
    createdAt: datetime

    @classmethod
    def from_comment(cls, comment: PostComment) -> "CommentEntry":
        return cls(
            user=comment.user_id,
            name=comment.name,
            text=comment.text,
            createdAt=as_utc(comment.created_at),
        )


class PostRead(BaseModel):
    """A post with its engagement records and derived status."""
    id: UUID
    title: str
    body: str
    topics: List[Topic]
    owner: UUID
    ownerName: str
    expiresAt: datetime
    status: PostStatus
    likes: List[ReactionEntry]
    dislikes: List[ReactionEntry]
    comments: List[CommentEntry]
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_post(cls, post: Post, now: Optional[datetime] = None) -> "PostRead":
        return cls(
            id=post.id,
            title=post.title,
            body=post.body,
            topics=post.topics,
            owner=post.owner_id,
            ownerName=post.owner_name,
            expiresAt=as_utc(post.expires_at),
            status=post.status_at(now),
            likes=[ReactionEntry.from_reaction(r) for r in post.likes],
            dislikes=[ReactionEntry.from_reaction(r) for r in post.dislikes],
            comments=[CommentEntry.from_comment(c) for c in post.comments],
            createdAt=as_utc(post.created_at),
            updatedAt=as_utc(post.updated_at),
        )


class PostSummary(BaseModel):
    """Browse-queue entry: counts instead of engagement records."""
    id: UUID
    title: str
    body: str
    ownerName: str
    status: PostStatus
    likes: int
    dislikes: int
    comments: int
    timeLeftSeconds: int

    @classmethod
    def from_post(cls, post: Post, now: Optional[datetime] = None) -> "PostSummary":
        return cls(
            id=post.id,
            title=post.title,
            body=post.body,
            ownerName=post.owner_name,
            status=post.status_at(now),
            likes=len(post.likes),
            dislikes=len(post.dislikes),
            comments=len(post.comments),
            timeLeftSeconds=time_left_seconds(post.expires_at, now),
        )


class PostCreatedResponse(BaseModel):
    message: str = "Post created"
    post: PostRead


class PostListResponse(BaseModel):
    posts: List[PostRead]


class TopicBrowseResponse(BaseModel):
    topic: str
    count: int
    posts: List[PostSummary]


class PostDetailResponse(BaseModel):
    post: PostRead
    timeLeftSeconds: int
    status: PostStatus


class ReactionResponse(BaseModel):
    message: str
    likes: int
    dislikes: int


class CommentsResponse(BaseModel):
    message: str = "Comment added"
    comments: List[CommentEntry]


class TopInterestResponse(BaseModel):
    message: str = "Top interest post found"
    topic: Optional[str] = None
    interestScore: int
    post: PostRead
