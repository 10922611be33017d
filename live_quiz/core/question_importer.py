"""Parse quiz questions from a plain-text authoring format.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question text (supports markdown). Additional lines until the next
       marker are treated as part of the question.
    TYPE: MCQ|Fill|TrueFalse   (optional; MCQ when options are given, else Fill)
    A: First option text       (MCQ only, two or more letters in order)
    B: Second option text
    CORRECT: B                 (MCQ: letter of the correct option)
    ANSWER: text               (Fill/TrueFalse: expected answer)
    MARKS: 10                  (optional)
    TIMELIMIT: 30              (optional; omit to use the quiz default)

Example:

    Q: What is the capital of France?
    A: Berlin
    B: Paris
    CORRECT: B
    TIMELIMIT: 20

    Q: Water boils at 100 degrees Celsius at sea level.
    TYPE: TrueFalse
    ANSWER: True
"""

from __future__ import annotations

from dataclasses import dataclass
import string

from live_quiz.constants.quiz_constants import DEFAULT_MARKS
from live_quiz.core.models import QuestionType


class QuestionImportError(Exception):
    """Raised when a question block cannot be parsed."""


@dataclass(slots=True)
class ImportedQuestion:
    """Question content before it is numbered and stored."""

    type: QuestionType
    question: str
    correct_answer: str
    options: list[str] | None = None
    marks: int = DEFAULT_MARKS
    time_limit: int | None = None


_OPTION_LETTERS = string.ascii_uppercase
_TYPE_NAMES = {member.value.upper(): member for member in QuestionType}


def parse_questions(text: str) -> list[ImportedQuestion]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    questions = [_parse_block(block) for block in blocks if block]
    if not questions:
        raise QuestionImportError("Import did not contain any questions.")
    return questions


def _parse_block(block: str) -> ImportedQuestion:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    question_type: QuestionType | None = None
    correct_letter: str | None = None
    answer_text: str | None = None
    marks = DEFAULT_MARKS
    time_limit: int | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("TYPE:"):
            raw_type = line.split(":", 1)[1].strip().upper()
            if raw_type not in _TYPE_NAMES:
                raise QuestionImportError("TYPE must be one of MCQ, Fill or TrueFalse.")
            question_type = _TYPE_NAMES[raw_type]
            current_section = None
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("ANSWER:"):
            answer_text = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if upper.startswith("MARKS:"):
            marks = _positive_int(line, "MARKS")
            current_section = None
            continue

        if upper.startswith("TIMELIMIT:"):
            time_limit = _positive_int(line, "TIMELIMIT")
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuestionImportError("Question text missing (Q: ...)")

    if question_type is None:
        question_type = QuestionType.MCQ if options else QuestionType.FILL

    if question_type != QuestionType.MCQ:
        if options:
            raise QuestionImportError("Only MCQ questions may list options.")
        if not answer_text:
            raise QuestionImportError("ANSWER is required for Fill and TrueFalse questions.")
        return ImportedQuestion(
            type=question_type,
            question=question_text,
            correct_answer=answer_text,
            marks=marks,
            time_limit=time_limit,
        )

    letters = _OPTION_LETTERS[: len(options)]
    if sorted(options) != list(letters):
        raise QuestionImportError("Options must use consecutive letters starting at A.")
    if len(options) < 2:
        raise QuestionImportError("MCQ questions need at least two options.")
    option_list = [options[letter].strip() for letter in letters]

    if correct_letter is not None:
        if correct_letter not in options:
            raise QuestionImportError(f"CORRECT must be one of {', '.join(letters)}.")
        correct_answer = option_list[letters.index(correct_letter)]
    elif answer_text:
        correct_answer = answer_text
    else:
        raise QuestionImportError("MCQ questions need CORRECT (or ANSWER).")

    return ImportedQuestion(
        type=question_type,
        question=question_text,
        correct_answer=correct_answer,
        options=option_list,
        marks=marks,
        time_limit=time_limit,
    )


def _positive_int(line: str, label: str) -> int:
    raw_value = line.split(":", 1)[1].strip()
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuestionImportError(f"{label} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuestionImportError(f"{label} must be a positive integer.")
    return parsed_value
