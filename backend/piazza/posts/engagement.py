"""
Engagement engine: likes, dislikes and comments on a single post.

The functions here mutate an already-loaded ``Post`` aggregate in memory and
never touch the session. Callers load the post with a row lock, apply one
operation and commit, so every precondition is checked before anything is
written.

Invariants:
- a user holds at most one reaction per post (like XOR dislike XOR none)
- repeating the same reaction is a no-op
- comments are only ever appended
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..core.errors import PostExpired, SelfReactionForbidden, ValidationError
from ..db.models.post import Post, PostComment, PostReaction, ReactionKind
from ..db.models.user import User
from .lifecycle import is_expired, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReactionCounts:
    likes: int
    dislikes: int


def reaction_counts(post: Post) -> ReactionCounts:
    return ReactionCounts(likes=len(post.likes), dislikes=len(post.dislikes))


def find_reaction(post: Post, user_id) -> Optional[PostReaction]:
    for reaction in post.reactions:
        if reaction.user_id == user_id:
            return reaction
    return None


def _ensure_live(post: Post, now: datetime, action: str) -> None:
    if is_expired(post.expires_at, now):
        raise PostExpired(f"Post is expired; cannot {action}")


def _react(post: Post, user: User, kind: ReactionKind, now: Optional[datetime]) -> ReactionCounts:
    if now is None:
        now = utcnow()
    action = kind.value

    _ensure_live(post, now, action)
    if post.owner_id == user.id:
        raise SelfReactionForbidden(f"Post owner cannot {action} their own post")

    existing = find_reaction(post, user.id)
    if existing is None:
        post.reactions.append(
            PostReaction(user_id=user.id, name=user.name, kind=kind, created_at=now)
        )
        post.updated_at = now
    elif existing.kind != kind:
        # Switching sentiment drops the old entry and records a fresh one
        existing.kind = kind
        existing.name = user.name
        existing.created_at = now
        post.updated_at = now
    else:
        logger.debug(f"[ENGAGEMENT] User {user.id} already {action}d post {post.id}")

    return reaction_counts(post)


def like(post: Post, user: User, now: Optional[datetime] = None) -> ReactionCounts:
    """
    Like a post, replacing any dislike by the same user.

    Raises:
        PostExpired: If the post is no longer Live
        SelfReactionForbidden: If ``user`` owns the post
    """
    return _react(post, user, ReactionKind.LIKE, now)


def dislike(post: Post, user: User, now: Optional[datetime] = None) -> ReactionCounts:
    """
    Dislike a post, replacing any like by the same user.

    Raises:
        PostExpired: If the post is no longer Live
        SelfReactionForbidden: If ``user`` owns the post
    """
    return _react(post, user, ReactionKind.DISLIKE, now)


def _clean_comment_text(text: Optional[str]) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment text is required")
    return text


def comment(
    post: Post,
    user: User,
    text: Optional[str],
    now: Optional[datetime] = None,
) -> List[PostComment]:
    """
    Append a comment. Owners may comment on their own posts.

    Returns:
        List[PostComment]: The full comment sequence after the append

    Raises:
        ValidationError: If ``text`` is empty
        PostExpired: If the post is no longer Live
    """
    if now is None:
        now = utcnow()
    text = _clean_comment_text(text)
    _ensure_live(post, now, "comment")

    post.comments.append(
        PostComment(user_id=user.id, name=user.name, text=text, created_at=now)
    )
    post.updated_at = now
    return list(post.comments)
