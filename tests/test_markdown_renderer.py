from live_quiz.core.markdown_renderer import MarkdownRenderer
from live_quiz.core.models import Question, QuestionType


def _question(text, options=None, question_type=QuestionType.MCQ):
    return Question(
        id=1,
        quiz_id=1,
        question_number=1,
        type=question_type,
        question=text,
        correct_answer="x",
        options=options,
    )


def test_question_text_renders_as_blocks_and_options_inline():
    rendered = MarkdownRenderer().render_question(
        _question("Which is *larger*?\n\n| a | b |\n|---|---|\n| 1 | 2 |", ["`2 ** 10`", "~~1000~~"])
    )

    assert "<em>larger</em>" in rendered.question_html
    assert "<table>" in rendered.question_html
    assert rendered.options_html == ["<code>2 ** 10</code>", "<s>1000</s>"]


def test_raw_html_is_escaped():
    html = MarkdownRenderer().render_block("<script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_blank_text_and_optionless_questions():
    renderer = MarkdownRenderer()
    rendered = renderer.render_question(_question("   ", question_type=QuestionType.FILL))

    assert rendered.question_html == "<p><em>No question text.</em></p>"
    assert rendered.options_html is None
