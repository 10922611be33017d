"""Serialize quiz questions into the plain-text format used for imports."""

from __future__ import annotations

import string

from live_quiz.core.models import Question, QuestionType

_OPTION_LETTERS = string.ascii_uppercase


def serialize_questions(questions: list[Question]) -> str:
    if not questions:
        return ""
    blocks = [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = []

    question_lines = question.question.splitlines() or [question.question]
    lines.append(f"Q: {question_lines[0] if question_lines else ''}")
    lines.extend(question_lines[1:])
    lines.append(f"TYPE: {question.type.value}")

    if question.type == QuestionType.MCQ:
        options = question.options or []
        for letter, option_text in zip(_OPTION_LETTERS, options):
            option_lines = option_text.splitlines() or [option_text]
            lines.append(f"{letter}: {option_lines[0] if option_lines else ''}")
            lines.extend(option_lines[1:])
        if question.correct_answer in options:
            lines.append(f"CORRECT: {_OPTION_LETTERS[options.index(question.correct_answer)]}")
        else:
            lines.append(f"ANSWER: {question.correct_answer}")
    else:
        lines.append(f"ANSWER: {question.correct_answer}")

    lines.append(f"MARKS: {question.marks}")
    if question.time_limit is not None:
        lines.append(f"TIMELIMIT: {question.time_limit}")

    return "\n".join(lines)
