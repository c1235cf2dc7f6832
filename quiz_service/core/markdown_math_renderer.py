"""Markdown rendering for question prompts served to quiz-takers.

Inline LaTeX is left as ``$...$`` for MathJax on the client.
"""

from __future__ import annotations

from markdown_it import MarkdownIt

_EMPTY_PROMPT_HTML = "<p><em>No content provided.</em></p>"

# MarkdownIt renders are read-only, so request threads share one parser.
_question_markdown = MarkdownIt("commonmark", {"html": False}).enable("table")


def render_question_text(text: str) -> str:
    """Return the HTML fragment shown next to a question's raw text."""
    prompt = text.strip()
    if not prompt:
        return _EMPTY_PROMPT_HTML
    return _question_markdown.render(prompt)
