"""
Comment service — comment creation and lookup for the Post aggregate.

Creating a comment subscribes its author to the post and yields a
``CommentCreated`` payload; the router hands that payload to
``comment_notification_service`` to e-mail watchers and mentioned users.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from intranet import error_codes
from intranet.enums import WallType
from intranet.exceptions import ValidationError
from intranet.mentions import parse_mentioned_user_ids
from intranet.models import Comment
from intranet.schemas import CommentCreate, CommentCreated
from intranet.services import post_service, user_service


def _comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "author_id": comment.author_id,
        "message_body": comment.message_body,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
    }


def _mentioned_user_ids(data: CommentCreate) -> list[int]:
    """Explicit ids first, then ids from mention markup; author excluded."""
    ids: list[int] = []
    for user_id in [*data.mentioned_user_ids, *parse_mentioned_user_ids(data.message_body)]:
        if user_id != data.author_id and user_id not in ids:
            ids.append(user_id)
    return ids


async def create_comment(
    db: AsyncSession,
    post_id: int,
    data: CommentCreate,
) -> CommentCreated | None:
    """
    Append a comment to *post_id* and subscribe the author to the post.

    Returns None when the post does not exist; an unknown author raises
    ``NotFoundError``.
    """
    post = await post_service.get_post(db, post_id)
    if post is None:
        return None
    await user_service.get_application_user(db, data.author_id)

    comment = Comment(post_id=post_id, author_id=data.author_id, message_body=data.message_body)
    db.add(comment)
    await db.flush()

    await post_service.watch_post(db, post_id, data.author_id)

    return CommentCreated(
        comment_id=comment.id,
        post_id=post_id,
        wall_id=post.wall_id,
        wall_type=WallType(post.wall.type),
        comment_creator=data.author_id,
        mentioned_user_ids=_mentioned_user_ids(data),
    )


async def get_comment(db: AsyncSession, comment_id: int) -> dict | None:
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    comment = result.scalar_one_or_none()
    return _comment_to_dict(comment) if comment else None


async def get_comments(db: AsyncSession, post_id: int) -> list[dict]:
    q = select(Comment).where(Comment.post_id == post_id).order_by(Comment.created_at, Comment.id)
    result = await db.execute(q)
    return [_comment_to_dict(c) for c in result.scalars().all()]


async def get_comment_body(db: AsyncSession, comment_id: int) -> str:
    """Return the raw markdown body of *comment_id*."""
    result = await db.execute(select(Comment.message_body).where(Comment.id == comment_id))
    body = result.scalar_one_or_none()
    if body is None:
        raise ValidationError(
            error_codes.CONTENT_DOES_NOT_EXIST, f"Comment {comment_id} does not exist"
        )
    return body


async def load_comment(db: AsyncSession, comment_id: int) -> Comment:
    """Return the comment with its parent post eagerly loaded."""
    q = select(Comment).where(Comment.id == comment_id).options(joinedload(Comment.post))
    result = await db.execute(q)
    comment = result.unique().scalar_one_or_none()
    if comment is None:
        raise ValidationError(
            error_codes.CONTENT_DOES_NOT_EXIST, f"Comment {comment_id} does not exist"
        )
    return comment
