"""Quiz-related limits and grading constants shared across core and server layers."""

QUIZ_TITLE_MIN_LENGTH: int = 3
QUIZ_TITLE_MAX_LENGTH: int = 200

QUESTION_TEXT_MAX_LENGTH: int = 1000
TEXT_QUESTION_MAX_LENGTH: int = 300

OPTION_TEXT_MAX_LENGTH: int = 500
MAX_OPTIONS_PER_QUESTION: int = 10

PASS_PERCENTAGE: int = 60
# Ordered from highest to lowest; anything below the last band is an F.
GRADE_BANDS: tuple[tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)
FAILING_GRADE: str = "F"
