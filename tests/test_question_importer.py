import pytest

from live_quiz.core.models import QuestionType
from live_quiz.core.question_importer import QuestionImportError, parse_questions

SAMPLE = """
Q: What is the capital of France?
A: Berlin
B: Paris
C: Madrid
CORRECT: B
TIMELIMIT: 20

Q: Water boils at 100 degrees Celsius at sea level.
TYPE: TrueFalse
ANSWER: True
MARKS: 5

---
Q: The chemical symbol for gold is
   written with two letters.
ANSWER: Au
"""


def test_parses_each_question_type():
    mcq, true_false, fill = parse_questions(SAMPLE)

    assert mcq.type == QuestionType.MCQ
    assert mcq.options == ["Berlin", "Paris", "Madrid"]
    assert mcq.correct_answer == "Paris"
    assert mcq.time_limit == 20
    assert mcq.marks == 10

    assert true_false.type == QuestionType.TRUE_FALSE
    assert true_false.correct_answer == "True"
    assert true_false.marks == 5
    assert true_false.options is None

    assert fill.type == QuestionType.FILL
    assert fill.question == "The chemical symbol for gold is\nwritten with two letters."
    assert fill.time_limit is None


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "any questions"),
        ("A: lonely option\nB: other\nCORRECT: A", "Question text missing"),
        ("Q: Pick\nA: one\nB: two\nCORRECT: D", "CORRECT must be one of"),
        ("Q: Pick\nA: one\nCORRECT: A", "at least two options"),
        ("Q: Pick\nA: one\nC: three\nCORRECT: A", "consecutive letters"),
        ("Q: Say it\nTYPE: Essay\nANSWER: x", "TYPE must be"),
        ("Q: Say it\nTYPE: Fill", "ANSWER is required"),
        ("Q: Say it\nANSWER: x\nTIMELIMIT: soon", "TIMELIMIT must be an integer"),
        ("Q: Say it\nANSWER: x\nMARKS: 0", "MARKS must be a positive"),
    ],
)
def test_rejects_malformed_blocks(text, message):
    with pytest.raises(QuestionImportError, match=message):
        parse_questions(text)


def test_import_and_export_through_manager(manager, make_quiz):
    quiz = make_quiz(15)

    created = manager.import_questions(quiz.id, SAMPLE)

    assert [q.question_number for q in created] == [2, 3, 4]
    exported = manager.export_questions(quiz.id)
    assert exported.count("---") == 3
    assert "Q: What is the capital of France?\nTYPE: MCQ\nA: Berlin\nB: Paris\nC: Madrid\nCORRECT: B" in exported
    assert "TYPE: TrueFalse\nANSWER: True\nMARKS: 5" in exported

    reparsed = parse_questions(exported)
    assert [q.correct_answer for q in reparsed] == ["Yes", "Paris", "True", "Au"]
