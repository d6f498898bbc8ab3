"""Markdown rendering and HTML sanitization for chat bubbles.

Rendering and sanitizing are separate pure functions so either can be
swapped: `render_markdown` produces HTML from assistant markdown,
`sanitize_html` reduces arbitrary HTML to a small allowlist of tags.
"""

import html
import re
from collections.abc import Callable

from markdown_it import MarkdownIt

_markdown = (
    MarkdownIt("commonmark", {"html": False, "breaks": True})
    .enable("table")
    .enable("strikethrough")
)

ALLOWED_TAGS = frozenset({
    "a", "blockquote", "br", "code", "del", "em", "h1", "h2", "h3", "h4", "h5", "h6",
    "hr", "li", "ol", "p", "pre", "s", "strong", "table", "tbody", "td", "th",
    "thead", "tr", "ul",
})
SAFE_URL_SCHEMES = ("http://", "https://", "mailto:", "#", "/")

_TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\b([^>]*)>")
_HREF_RE = re.compile(r"""href\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)
_CODE_CLASS_RE = re.compile(r'class\s*=\s*"(language-[\w+-]+)"')
_DANGEROUS_BLOCK_RE = re.compile(
    r"<(script|style|iframe|object)\b[^>]*>[\s\S]*?</\1\s*>", re.IGNORECASE
)


def render_markdown(text: str) -> str:
    """Convert markdown to HTML.

    Raw HTML in the input is escaped rather than passed through.
    """
    return _markdown.render(text)


def _clean_tag(match: re.Match[str]) -> str:
    closing, tag, attrs = match.group(1), match.group(2).lower(), match.group(3)
    if tag not in ALLOWED_TAGS:
        return ""
    if closing:
        return f"</{tag}>"

    if tag == "a":
        href_match = _HREF_RE.search(attrs)
        href = html.unescape((href_match.group(1) or href_match.group(2)) if href_match else "")
        if not href.strip().lower().startswith(SAFE_URL_SCHEMES):
            return "<a>"
        return (
            f'<a href="{html.escape(href, quote=True)}" target="_blank" '
            f'rel="noopener noreferrer">'
        )

    if tag == "code":
        class_match = _CODE_CLASS_RE.search(attrs)
        if class_match:
            return f'<code class="{class_match.group(1)}">'

    return f"<{tag}>"


def sanitize_html(unsafe: str) -> str:
    """Reduce HTML to allowlisted tags with no attributes except safe links.

    Script-like elements are removed with their content; other disallowed
    tags are stripped, keeping their text.
    """
    cleaned = _DANGEROUS_BLOCK_RE.sub("", unsafe)
    return _TAG_RE.sub(_clean_tag, cleaned)


class MessageFormatter:
    """Pairs a renderer with a sanitizer for bubble content.

    Args:
        render: Markdown to (unsafe) HTML.
        sanitize: Unsafe HTML to safe HTML.
    """

    def __init__(
        self,
        render: Callable[[str], str] = render_markdown,
        sanitize: Callable[[str], str] = sanitize_html,
    ) -> None:
        self._render = render
        self._sanitize = sanitize

    def assistant(self, text: str) -> str:
        """Safe HTML for assistant markdown."""
        return self._sanitize(self._render(text))

    def user(self, text: str) -> str:
        """Safe HTML for user text, shown verbatim with line breaks."""
        return html.escape(text).replace("\n", "<br>")
