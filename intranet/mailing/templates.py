"""HTML bodies for notification e-mails."""
from datetime import datetime, timezone
from html import escape

NEW_POST_COMMENT_SUBJECT = 'New comment on "{post}" by {author}'
POST_COMMENT_TITLE = 'New comment on "{post}"'
NEW_MENTION_SUBJECT = "You have been mentioned in the post"
DEFAULT_ACTION_BUTTON_TITLE = "Open"


def _layout(title: str, content: str, settings_url: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #4A90E2;">{escape(title)}</h2>
        {content}
        <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
        <p style="color: #999; font-size: 12px; text-align: center;">
            <a href="{settings_url}" style="color: #999;">Manage notification settings</a>
            &middot; &copy; {datetime.now(timezone.utc).year}
        </p>
    </div>
</body>
</html>
"""


def _button(url: str, label: str) -> str:
    return f"""
        <div style="text-align: center; margin: 30px 0;">
            <a href="{url}"
               style="background-color: #4A90E2;
                      color: white;
                      padding: 12px 30px;
                      text-decoration: none;
                      border-radius: 5px;
                      display: inline-block;">
                {escape(label)}
            </a>
        </div>"""


def render_new_post_comment(
    title: str,
    author_picture_url: str | None,
    author_full_name: str,
    post_url: str,
    message_body_html: str,
    settings_url: str,
    action_button_title: str = DEFAULT_ACTION_BUTTON_TITLE,
) -> str:
    picture = ""
    if author_picture_url:
        picture = (
            f'<img src="{author_picture_url}" alt="" width="40" height="40" '
            'style="border-radius: 50%; vertical-align: middle; margin-right: 10px;">'
        )
    content = f"""
        <p>{picture}<strong>{escape(author_full_name)}</strong> commented:</p>
        <div style="border-left: 3px solid #eee; padding-left: 15px;">{message_body_html}</div>
        {_button(post_url, action_button_title)}"""
    return _layout(title, content, settings_url)


def render_new_mention(
    mentioned_user_full_name: str,
    comment_author_full_name: str,
    post_url: str,
    settings_url: str,
    message_body_html: str,
) -> str:
    content = f"""
        <p>Hi {escape(mentioned_user_full_name)},</p>
        <p><strong>{escape(comment_author_full_name)}</strong> mentioned you in a comment:</p>
        <div style="border-left: 3px solid #eee; padding-left: 15px;">{message_body_html}</div>
        {_button(post_url, DEFAULT_ACTION_BUTTON_TITLE)}"""
    return _layout(NEW_MENTION_SUBJECT, content, settings_url)
