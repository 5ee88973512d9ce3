import re

# Mention markup inserted by the front-end editor: @[Full Name](42)
MENTION_RE = re.compile(r"@\[(?P<name>[^\]]+)\]\((?P<user_id>\d+)\)")


def parse_mentioned_user_ids(text: str) -> list[int]:
    """Return user ids mentioned in *text*, in order of first appearance."""
    ids: list[int] = []
    for match in MENTION_RE.finditer(text):
        user_id = int(match.group("user_id"))
        if user_id not in ids:
            ids.append(user_id)
    return ids


def render_mentions(text: str, template: str = "**@{name}**") -> str:
    """Replace mention markup with *template* formatted with the user's name."""
    return MENTION_RE.sub(lambda m: template.format(name=m.group("name")), text)
