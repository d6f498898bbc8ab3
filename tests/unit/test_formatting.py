"""Unit tests for markdown rendering and sanitization."""

import pytest
import pytest_check as check

from streamchat.ui.formatting import MessageFormatter, render_markdown, sanitize_html


class TestRenderMarkdown:
    def test_basic_markdown(self) -> None:
        html = render_markdown("**bold** and *it* and `code`")

        check.is_in("<strong>bold</strong>", html)
        check.is_in("<em>it</em>", html)
        check.is_in("<code>code</code>", html)

    def test_lists_and_code_blocks(self) -> None:
        html = render_markdown("- one\n- two\n\n```python\nx = 1\n```\n")

        check.is_in("<ul>", html)
        check.is_in("<li>one</li>", html)
        check.is_in('<code class="language-python">', html)

    def test_raw_html_is_escaped(self) -> None:
        html = render_markdown("<script>alert(1)</script>")

        check.is_not_in("<script>", html)
        check.is_in("&lt;script&gt;", html)

    def test_single_newline_becomes_break(self) -> None:
        assert "<br" in render_markdown("line one\nline two")


class TestSanitizeHtml:
    def test_allowed_tags_survive_without_attributes(self) -> None:
        assert sanitize_html('<p style="color:red">hi <strong>there</strong></p>') == (
            "<p>hi <strong>there</strong></p>"
        )

    def test_script_removed_with_content(self) -> None:
        assert sanitize_html("<p>a</p><script>steal()</script><p>b</p>") == "<p>a</p><p>b</p>"

    def test_unknown_tags_stripped_keeping_text(self) -> None:
        assert sanitize_html('<div onclick="x()"><span>text</span></div>') == "text"

    def test_safe_link_kept(self) -> None:
        html = sanitize_html('<a href="https://example.com/?a=1&amp;b=2">x</a>')

        check.is_in('href="https://example.com/?a=1&amp;b=2"', html)
        check.is_in('rel="noopener noreferrer"', html)

    @pytest.mark.parametrize("href", ["javascript:alert(1)", "JavaScript:x", "data:text/html,x"])
    def test_unsafe_link_loses_href(self, href: str) -> None:
        assert sanitize_html(f'<a href="{href}">x</a>') == "<a>x</a>"

    def test_code_language_class_kept(self) -> None:
        html = sanitize_html('<pre><code class="language-py" data-x="1">x</code></pre>')

        assert html == '<pre><code class="language-py">x</code></pre>'

    def test_escaped_text_untouched(self) -> None:
        assert sanitize_html("&lt;b&gt;") == "&lt;b&gt;"


class TestMessageFormatter:
    def test_assistant_renders_then_sanitizes(self) -> None:
        calls: list[str] = []

        def render(text: str) -> str:
            calls.append("render")
            return f"<b>{text}</b>"

        def sanitize(html: str) -> str:
            calls.append("sanitize")
            return html.replace("<b>", "").replace("</b>", "")

        formatter = MessageFormatter(render=render, sanitize=sanitize)

        check.equal(formatter.assistant("x"), "x")
        check.equal(calls, ["render", "sanitize"])

    def test_user_text_escaped_with_breaks(self) -> None:
        formatter = MessageFormatter()

        assert formatter.user("<b>hi</b>\nthere") == "&lt;b&gt;hi&lt;/b&gt;<br>there"

    def test_partial_markdown_renders(self) -> None:
        """Half-received markdown (unclosed fence) still renders safely."""
        html = MessageFormatter().assistant("```py\nprint('<x>')")

        check.is_in("<pre>", html)
        check.is_not_in("<x>", html)
