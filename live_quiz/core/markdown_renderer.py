"""Markdown rendering for question text shown to participants.

Question text and MCQ options are authored as Markdown and rendered on the
server, so every client displays the same markup. Raw HTML in the source is
escaped rather than passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

from live_quiz.core.models import Question

_EMPTY_QUESTION_HTML = "<p><em>No question text.</em></p>"


@dataclass(slots=True)
class RenderedQuestion:
    question_html: str
    options_html: list[str] | None = None


@dataclass(slots=True)
class MarkdownRenderer:
    """Turns question Markdown into block HTML and options into inline HTML."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_block(self, markdown_text: str) -> str:
        text = markdown_text.strip()
        if not text:
            return _EMPTY_QUESTION_HTML
        return self._markdown.render(text)

    def render_inline(self, markdown_text: str) -> str:
        """Options sit inside buttons, so they must not be wrapped in ``<p>``."""
        return self._markdown.renderInline(markdown_text.strip())

    def render_question(self, question: Question) -> RenderedQuestion:
        options_html = None
        if question.options is not None:
            options_html = [self.render_inline(option) for option in question.options]
        return RenderedQuestion(
            question_html=self.render_block(question.question),
            options_html=options_html,
        )


# Read-only renders on one MarkdownIt instance are safe across request threads.
renderer = MarkdownRenderer()
