"""Quiz-related constants shared across the core and server layers."""

DEFAULT_TIME_PER_QUESTION_SECONDS: int = 30
DEFAULT_MARKS: int = 10
TRUE_FALSE_ANSWERS: tuple[str, str] = ("True", "False")
