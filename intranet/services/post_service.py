"""
Post service — walls, posts and post watchers.

A user watching a post receives an e-mail for every new comment on it.
Authors start watching their own post, and commenters start watching the
post they comment on (see ``comment_service``).
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from intranet.models import Post, PostWatcher, User, Wall
from intranet.schemas import PostCreate, WallCreate


def _wall_to_dict(wall: Wall) -> dict:
    return {
        "id": wall.id,
        "organization_id": wall.organization_id,
        "name": wall.name,
        "type": wall.type,
    }


def _post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "wall_id": post.wall_id,
        "author_id": post.author_id,
        "message_body": post.message_body,
        "created_at": post.created_at.isoformat() if post.created_at else None,
    }


# ---------------------------------------------------------------------------
# Walls
# ---------------------------------------------------------------------------

async def create_wall(db: AsyncSession, data: WallCreate) -> dict:
    wall = Wall(organization_id=data.organization_id, name=data.name, type=data.type.value)
    db.add(wall)
    await db.flush()
    return _wall_to_dict(wall)


async def get_wall(db: AsyncSession, wall_id: int) -> Wall | None:
    result = await db.execute(select(Wall).where(Wall.id == wall_id))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

async def create_post(db: AsyncSession, wall_id: int, data: PostCreate) -> dict | None:
    """
    Publish a post on *wall_id* and subscribe its author as a watcher.

    Returns None when the wall does not exist.
    """
    if await get_wall(db, wall_id) is None:
        return None

    post = Post(wall_id=wall_id, author_id=data.author_id, message_body=data.message_body)
    db.add(post)
    await db.flush()
    db.add(PostWatcher(post_id=post.id, user_id=data.author_id))
    await db.flush()
    await db.refresh(post, ["created_at"])
    return _post_to_dict(post)


async def get_post(db: AsyncSession, post_id: int) -> Post | None:
    """Return the post with its wall loaded, or None."""
    q = select(Post).where(Post.id == post_id).options(joinedload(Post.wall))
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def get_posts(db: AsyncSession, wall_id: int) -> list[dict]:
    q = select(Post).where(Post.wall_id == wall_id).order_by(Post.created_at.desc(), Post.id.desc())
    result = await db.execute(q)
    return [_post_to_dict(p) for p in result.scalars().all()]


# ---------------------------------------------------------------------------
# Watchers
# ---------------------------------------------------------------------------

async def watch_post(db: AsyncSession, post_id: int, user_id: int) -> bool:
    """
    Subscribe *user_id* to *post_id*.  Idempotent.

    Returns False when the post does not exist.
    """
    result = await db.execute(select(Post.id).where(Post.id == post_id))
    if result.scalar_one_or_none() is None:
        return False

    existing = await db.get(PostWatcher, (post_id, user_id))
    if existing is None:
        db.add(PostWatcher(post_id=post_id, user_id=user_id))
        await db.flush()
    return True


async def unwatch_post(db: AsyncSession, post_id: int, user_id: int) -> bool:
    """Remove the subscription; False when the user was not watching."""
    existing = await db.get(PostWatcher, (post_id, user_id))
    if existing is None:
        return False
    await db.delete(existing)
    await db.flush()
    return True


async def get_post_watchers_for_email_notifications(db: AsyncSession, post_id: int) -> list[User]:
    """Return watchers of *post_id* who accept followed-post e-mails."""
    q = (
        select(User)
        .join(PostWatcher, PostWatcher.user_id == User.id)
        .where(PostWatcher.post_id == post_id)
        .where(User.following_posts_email_notifications.is_(True))
        .order_by(User.id)
    )
    result = await db.execute(q)
    return list(result.scalars().all())
