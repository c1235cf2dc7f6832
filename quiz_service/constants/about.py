"""Static metadata describing the quiz service."""

APP_NAME = "Quiz Service"
APP_VERSION = "1.0.0"
APP_ABOUT_TEXT = (
    "Quiz Service is an in-memory API for authoring quizzes with single-choice, "
    "multiple-choice and text questions, serving them without answers, and "
    "scoring submissions with a letter grade."
)

API_DOCUMENTATION: dict[str, str] = {
    "POST /api/quizzes": "Create a new quiz",
    "GET /api/quizzes": "Get all quizzes",
    "GET /api/quizzes/:quizId": "Get quiz by ID",
    "PATCH /api/quizzes/:quizId": "Update quiz title",
    "POST /api/quizzes/:quizId/questions": "Add question to quiz",
    "GET /api/quizzes/:quizId/questions": "Get quiz questions (without answers)",
    "DELETE /api/quizzes/:quizId/questions/:questionId": "Remove a question from a quiz",
    "POST /api/quizzes/:quizId/submit": "Submit quiz answers",
    "DELETE /api/quizzes/:quizId": "Delete a quiz",
    "GET /api/quizzes/:quizId/stats": "Get quiz statistics",
}
