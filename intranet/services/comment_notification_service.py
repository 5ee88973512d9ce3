"""
Comment notification service — e-mails sent when a comment is created.

Recipients form two disjoint groups:

- **mentioned users**: ids referenced by the comment whose mention
  notifications are enabled.  Each gets the "new mention" template.
- **post watchers**: everyone watching the post with followed-post
  notifications enabled, minus the comment author and minus the mentioned
  users.  Each gets the "new post comment" template.

Sends are best-effort and per recipient: a failed delivery is logged and
the remaining recipients are still processed.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intranet import error_codes
from intranet.enums import WallType
from intranet.exceptions import NotFoundError
from intranet.mailing import markdown_converter, templates, urls
from intranet.models import Event, Project, User
from intranet.schemas import CommentCreated
from intranet.services import comment_service, organization_service, post_service, user_service

logger = logging.getLogger(__name__)

_CUT_LENGTH = 30


def cut_message(value: str) -> str:
    """Shorten a post body for use in a subject line."""
    new_line = value.find("\n")
    if 0 < new_line <= _CUT_LENGTH:
        return value[:new_line] + "..."
    if len(value) > _CUT_LENGTH:
        return value[:_CUT_LENGTH] + "..."
    return value


async def send_email_notification(db: AsyncSession, comment: CommentCreated, email_service) -> None:
    """
    E-mail the watchers of the commented post and the users mentioned in
    the comment.

    Raises NotFoundError when the comment creator does not exist and
    ValidationError when the comment itself cannot be loaded.
    """
    creator = await user_service.get_application_user(db, comment.comment_creator)
    organization = await organization_service.get_organization_by_id(db, creator.organization_id)
    if organization is None:
        raise NotFoundError(
            error_codes.ORGANIZATION_DOES_NOT_EXIST,
            f"Organization {creator.organization_id} does not exist",
        )
    organization_name = organization["short_name"]

    mentioned_users = await user_service.get_users_with_mention_notifications(
        db, comment.mentioned_user_ids, creator.organization_id
    )
    mentioned_emails = {u.email for u in mentioned_users}
    destination_emails = [
        email
        for email in await _get_post_watchers_emails(db, creator, comment.post_id)
        if email not in mentioned_emails
    ]

    if destination_emails:
        await _send_post_watcher_emails(
            db, comment, destination_emails, creator, organization_name, email_service
        )

    if mentioned_users:
        await _send_mention_emails(
            db, comment, mentioned_users, creator, organization_name, email_service
        )


async def _get_post_watchers_emails(db: AsyncSession, creator: User, post_id: int) -> list[str]:
    watchers = await post_service.get_post_watchers_for_email_notifications(db, post_id)
    emails: list[str] = []
    for watcher in watchers:
        if watcher.email == creator.email or watcher.id == creator.id:
            continue
        if watcher.email not in emails:
            emails.append(watcher.email)
    return emails


async def _send_post_watcher_emails(
    db: AsyncSession,
    comment: CommentCreated,
    emails: list[str],
    creator: User,
    organization_name: str,
    email_service,
) -> None:
    loaded = await comment_service.load_comment(db, comment.comment_id)
    post_link = await get_post_link(
        db, comment.wall_type, comment.wall_id, organization_name, comment.post_id
    )
    post_excerpt = cut_message(loaded.post.message_body)

    subject = templates.NEW_POST_COMMENT_SUBJECT.format(post=post_excerpt, author=creator.full_name)
    content = templates.render_new_post_comment(
        title=templates.POST_COMMENT_TITLE.format(post=post_excerpt),
        author_picture_url=urls.picture_url(organization_name, creator.picture_id),
        author_full_name=creator.full_name,
        post_url=post_link,
        message_body_html=markdown_converter.convert_to_html(loaded.message_body),
        settings_url=urls.user_notification_settings_url(organization_name),
    )

    for email in emails:
        try:
            await email_service.send_email(email, subject, content)
        except Exception as exc:
            logger.warning("Failed to send comment notification to %s: %s", email, exc)


async def _send_mention_emails(
    db: AsyncSession,
    comment: CommentCreated,
    mentioned_users: list[User],
    creator: User,
    organization_name: str,
    email_service,
) -> None:
    body = await comment_service.get_comment_body(db, comment.comment_id)
    settings_url = urls.user_notification_settings_url(organization_name)
    post_url = urls.wall_post_url(organization_name, comment.post_id)
    message_body_html = markdown_converter.convert_to_html(body)

    for user in mentioned_users:
        try:
            content = templates.render_new_mention(
                mentioned_user_full_name=user.full_name,
                comment_author_full_name=creator.full_name,
                post_url=post_url,
                settings_url=settings_url,
                message_body_html=message_body_html,
            )
            await email_service.send_email(user.email, templates.NEW_MENTION_SUBJECT, content)
        except Exception as exc:
            logger.warning("Failed to send mention notification to %s: %s", user.email, exc)


async def get_post_link(
    db: AsyncSession, wall_type: WallType, wall_id: int, organization_name: str, post_id: int
) -> str:
    """
    Return the front-end link for a post.

    Posts on an event or project wall link to the owning event or project;
    everything else links to the post itself.
    """
    if wall_type == WallType.EVENTS:
        result = await db.execute(select(Event.id).where(Event.wall_id == wall_id).limit(1))
        event_id = result.scalar_one_or_none()
        if event_id is not None:
            return urls.event_url(organization_name, event_id)
    elif wall_type == WallType.PROJECT:
        result = await db.execute(select(Project.id).where(Project.wall_id == wall_id).limit(1))
        project_id = result.scalar_one_or_none()
        if project_id is not None:
            return urls.project_url(organization_name, project_id)

    if wall_type in (WallType.EVENTS, WallType.PROJECT):
        logger.warning("No %s owns wall %s; linking to post %s", wall_type.value, wall_id, post_id)
    return urls.wall_post_url(organization_name, post_id)
