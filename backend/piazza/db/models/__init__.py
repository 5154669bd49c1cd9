"""
Import all models to ensure they are registered with SQLAlchemy.
"""
from ..base import Base
from .user import User
from .post import Post, PostTopic, PostReaction, PostComment, Topic, ReactionKind
