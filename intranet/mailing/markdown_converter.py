import html

import markdown

from intranet.mentions import render_mentions


def convert_to_html(text: str) -> str:
    """
    Render user-authored markdown to HTML for e-mail bodies.

    Raw HTML in the source is escaped before rendering and mention markup
    is shown as a bold ``@Name``.
    """
    source = render_mentions(html.escape(text, quote=False))
    return markdown.markdown(source, extensions=["nl2br"])
