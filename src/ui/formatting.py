"""HTML formatting for chat messages and PDF previews.

Bot text comes from a remote backend and is rendered with ``ui.html``, so
everything is escaped first (quotes included) and only the tags produced
here reach the page.
"""

import html
import re

from src.models.chat import AttachmentResult
from src.parsing.citations import CITATION_CLOSE, CITATION_OPEN, CITATION_SEPARATOR

_CITATION_BADGE = re.compile(
    rf"{CITATION_OPEN}\d+:\d+{CITATION_SEPARATOR}([^{CITATION_OPEN}{CITATION_CLOSE}]+){CITATION_CLOSE}"
)
# Runs on escaped text, so quotes in a URL stay entities inside the href value
_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)")


def markdown_to_html(text: str) -> str:
    """Convert bot markdown to HTML for chat display.

    Supports: bold, italic, inline code, links, and citation badges.
    """
    text = html.escape(text)

    # Citation markers become small badges with the document name
    text = _CITATION_BADGE.sub(r'<span class="citation-badge">\1</span>', text)

    # Inline code (`code`)
    text = re.sub(r"`([^`]+)`", r'<code class="bg-gray-200 px-1 rounded text-xs">\1</code>', text)

    # Bold (**text**) and italic (*text*)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*]+)\*", r"<em>\1</em>", text)

    # Links [text](url), used for direct download fallbacks
    text = _LINK.sub(
        r'<a href="\2" class="text-indigo-600 underline" target="_blank" rel="noopener">\1</a>',
        text,
    )

    return text.replace("\n", "<br>")


def user_text_to_html(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def pdf_src(result: AttachmentResult) -> str:
    """Iframe source for a preview, with the viewer chrome hidden."""
    return f"{result.display_url}#toolbar=0&navpanes=0"


def iframe_props(result: AttachmentResult) -> dict[str, str]:
    """Props for a preview iframe.

    Set as individual props rather than a props string, so a citation name
    containing quotes or spaces stays one attribute value.
    """
    return {"src": pdf_src(result), "title": result.name}
