"""
User service — users and their e-mail notification preferences.

Users are fetched without caching; the notification path reads them once
per comment and the data changes rarely.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet import error_codes
from intranet.exceptions import NotFoundError
from intranet.models import User
from intranet.schemas import NotificationSettingsUpdate, UserCreate


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "organization_id": user.organization_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "full_name": user.full_name,
        "email": user.email,
        "picture_id": user.picture_id,
        "mention_email_notifications": user.mention_email_notifications,
        "following_posts_email_notifications": user.following_posts_email_notifications,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


async def get_users(db: AsyncSession, organization_id: int | None = None) -> list[dict]:
    """Return users ordered by last name, optionally limited to one organization."""
    q = select(User).order_by(User.last_name, User.first_name)
    if organization_id is not None:
        q = q.where(User.organization_id == organization_id)
    result = await db.execute(q)
    return [_user_to_dict(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> dict | None:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    return _user_to_dict(user) if user else None


async def get_application_user(db: AsyncSession, user_id: int) -> User:
    """Return the User ORM instance, raising NotFoundError when missing."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(error_codes.USER_DOES_NOT_EXIST, f"User {user_id} does not exist")
    return user


async def get_users_with_mention_notifications(
    db: AsyncSession, user_ids: list[int], organization_id: int
) -> list[User]:
    """Return the users among *user_ids* in *organization_id* who accept mention e-mails."""
    if not user_ids:
        return []
    q = (
        select(User)
        .where(User.id.in_(user_ids))
        .where(User.organization_id == organization_id)
        .where(User.mention_email_notifications.is_(True))
        .order_by(User.id)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create a user.  E-mail uniqueness is enforced by the database; the
    router translates the IntegrityError into a 409.
    """
    user = User(
        organization_id=data.organization_id,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        picture_id=data.picture_id,
        mention_email_notifications=True,
        following_posts_email_notifications=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user, ["created_at"])
    return _user_to_dict(user)


async def update_notification_settings(
    db: AsyncSession, user_id: int, data: NotificationSettingsUpdate
) -> dict | None:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)
    await db.flush()
    return _user_to_dict(user)
