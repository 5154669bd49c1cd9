"""Tests for listings, the browse queue and top-interest selection."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from piazza.core.errors import NotFound
from piazza.crud import post as post_crud
from piazza.crud import user as user_crud
from piazza.db.models.post import Post, PostComment, PostReaction, ReactionKind, Topic
from piazza.posts import engagement, queries
from piazza.posts.lifecycle import PostStatus, utcnow


def scored(likes: int = 0, dislikes: int = 0, comments: int = 0) -> Post:
    reactions = [PostReaction(user_id=uuid4(), kind=ReactionKind.LIKE) for _ in range(likes)]
    reactions += [PostReaction(user_id=uuid4(), kind=ReactionKind.DISLIKE) for _ in range(dislikes)]
    return Post(
        id=uuid4(),
        reactions=reactions,
        comments=[PostComment(user_id=uuid4(), text="c") for _ in range(comments)],
    )


def test_interest_counts_likes_dislikes_and_comments() -> None:
    assert queries.interest_score(scored(2, 0, 0)) == 2
    assert queries.interest_score(scored(1, 1, 1)) == 3


def test_pick_top_interest_prefers_higher_score() -> None:
    a = scored(likes=2)
    b = scored(likes=1, dislikes=1, comments=1)

    top = queries.pick_top_interest([a, b])

    assert top.post is b
    assert top.interest == 3


def test_pick_top_interest_keeps_first_on_tie() -> None:
    first = scored(likes=1, comments=1)
    second = scored(dislikes=2)
    posts = [scored(), first, second]

    assert queries.pick_top_interest(posts).post is first
    assert queries.pick_top_interest(posts).post is first


def test_pick_top_interest_of_nothing_is_none() -> None:
    assert queries.pick_top_interest([]) is None


def test_parse_post_id_rejects_malformed_ids() -> None:
    with pytest.raises(NotFound):
        queries.parse_post_id("not-a-uuid")


@pytest.mark.parametrize(
    "raw, expected",
    [(Topic.SPORT, Topic.SPORT), ("Health", Topic.HEALTH), ("Cooking", None), ("tech", None)],
)
def test_known_topic(raw, expected) -> None:
    assert queries.known_topic(raw) is expected


@pytest.fixture
async def session(database):
    async with database.sessionmaker() as s:
        yield s


@pytest.fixture
async def users(session):
    owner = await user_crud.create_user(session, "Owner", "owner@piazza.io", "hash")
    fan = await user_crud.create_user(session, "Fan", "fan@piazza.io", "hash")
    await session.commit()
    return owner, fan


async def add_post(session, owner, title, topics, expires_at, created_at):
    post = await post_crud.create_post(
        session, owner=owner, title=title, body="body", topics=topics, expires_at=expires_at
    )
    post.created_at = created_at
    await session.commit()
    return post


async def test_listings_filter_by_derived_status_and_topic(session, users) -> None:
    owner, _ = users
    now = utcnow()
    old_live = await add_post(session, owner, "old live", [Topic.TECH], now + timedelta(minutes=5), now - timedelta(minutes=3))
    new_live = await add_post(session, owner, "new live", [Topic.TECH, Topic.SPORT], now + timedelta(minutes=1), now - timedelta(minutes=1))
    long_gone = await add_post(session, owner, "long gone", [Topic.TECH], now - timedelta(hours=1), now - timedelta(hours=2))
    just_gone = await add_post(session, owner, "just gone", [Topic.HEALTH], now - timedelta(seconds=1), now - timedelta(minutes=6))

    live = await queries.list_by_status_and_topic(session, PostStatus.LIVE, now=now)
    assert [p.title for p in live] == [new_live.title, old_live.title]

    expired = await queries.list_by_status_and_topic(session, PostStatus.EXPIRED, now=now)
    assert [p.title for p in expired] == [just_gone.title, long_gone.title]

    sport = await queries.list_by_status_and_topic(session, PostStatus.LIVE, Topic.SPORT, now=now)
    assert [p.title for p in sport] == ["new live"]

    expired_tech = await queries.list_by_status_and_topic(session, PostStatus.EXPIRED, Topic.TECH, now=now)
    assert [p.title for p in expired_tech] == ["long gone"]


async def test_classification_follows_the_clock(session, users) -> None:
    owner, _ = users
    now = utcnow()
    await add_post(session, owner, "soon", [Topic.TECH], now + timedelta(minutes=1), now)

    assert len(await queries.list_by_status_and_topic(session, PostStatus.LIVE, now=now)) == 1
    later = now + timedelta(minutes=2)
    assert await queries.list_by_status_and_topic(session, PostStatus.LIVE, now=later) == []
    assert len(await queries.list_by_status_and_topic(session, PostStatus.EXPIRED, now=later)) == 1


async def test_browse_queue_is_oldest_first_and_live_only(session, users) -> None:
    owner, _ = users
    now = utcnow()
    await add_post(session, owner, "second", [Topic.POLITICS], now + timedelta(minutes=5), now - timedelta(minutes=1))
    await add_post(session, owner, "first", [Topic.POLITICS], now + timedelta(minutes=5), now - timedelta(minutes=2))
    await add_post(session, owner, "gone", [Topic.POLITICS], now - timedelta(minutes=1), now - timedelta(minutes=3))

    posts = await queries.list_live_by_topic(session, Topic.POLITICS, now=now)

    assert [p.title for p in posts] == ["first", "second"]


async def test_top_interest_spans_engagement_kinds(session, users) -> None:
    owner, fan = users
    now = utcnow()
    a = await add_post(session, owner, "A", [Topic.TECH], now + timedelta(minutes=5), now - timedelta(minutes=2))
    b = await add_post(session, owner, "B", [Topic.TECH], now + timedelta(minutes=5), now - timedelta(minutes=1))
    other = await user_crud.create_user(session, "Other", "other@piazza.io", "hash")

    engagement.like(a, fan, now=now)
    engagement.like(a, other, now=now)
    engagement.like(b, fan, now=now)
    engagement.dislike(b, other, now=now)
    engagement.comment(b, fan, "hi", now=now)
    await session.commit()

    top = await queries.top_interest(session, Topic.TECH, now=now)

    assert top.post.id == b.id
    assert top.interest == 3


async def test_top_interest_tie_goes_to_oldest_post(session, users) -> None:
    owner, fan = users
    now = utcnow()
    newer = await add_post(session, owner, "newer", [Topic.SPORT], now + timedelta(minutes=5), now - timedelta(minutes=1))
    older = await add_post(session, owner, "older", [Topic.SPORT], now + timedelta(minutes=5), now - timedelta(minutes=2))
    engagement.like(newer, fan, now=now)
    engagement.like(older, fan, now=now)
    await session.commit()

    for _ in range(3):
        top = await queries.top_interest(session, Topic.SPORT, now=now)
        assert top.post.id == older.id


async def test_unknown_topic_matches_nothing(session, users) -> None:
    owner, _ = users
    now = utcnow()
    await add_post(session, owner, "live", [Topic.TECH], now + timedelta(minutes=5), now)

    assert await queries.list_by_status_and_topic(session, PostStatus.LIVE, "Cooking", now=now) == []
    assert await queries.list_live_by_topic(session, "Cooking", now=now) == []
    assert len(await queries.list_by_status_and_topic(session, PostStatus.LIVE, "Tech", now=now)) == 1

    with pytest.raises(NotFound) as exc_info:
        await queries.top_interest(session, "Cooking", now=now)
    assert exc_info.value.extra == {"topic": "Cooking"}


async def test_top_interest_without_live_posts_is_not_found(session, users) -> None:
    owner, _ = users
    now = utcnow()
    await add_post(session, owner, "old", [Topic.HEALTH], now - timedelta(minutes=1), now - timedelta(minutes=10))

    with pytest.raises(NotFound) as exc_info:
        await queries.top_interest(session, Topic.HEALTH, now=now)
    assert exc_info.value.extra == {"topic": "Health"}


async def test_get_by_id(session, users) -> None:
    owner, _ = users
    now = utcnow()
    post = await add_post(session, owner, "mine", [Topic.TECH], now + timedelta(minutes=5), now)

    found = await queries.get_by_id(session, str(post.id))
    assert found.id == post.id
    assert found.topics == [Topic.TECH]

    with pytest.raises(NotFound):
        await queries.get_by_id(session, uuid4())
