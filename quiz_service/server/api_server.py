"""FastAPI server that exposes the quiz endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from threading import Thread
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from quiz_service.constants.about import API_DOCUMENTATION, APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quiz_service.constants.network_constants import (
    ALLOWED_ORIGINS,
    API_PREFIX,
    APP_ENV,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from quiz_service.core.errors import QuizServiceError
from quiz_service.core.quiz_manager import QuizManager

logger = logging.getLogger(__name__)

_REQUIRED_QUESTION_FIELDS = (
    ("text", "Question text is required"),
    ("type", "Question type is required"),
    ("options", "Question options are required"),
)


class QuizPayload(BaseModel):
    """Payload schema for creating or renaming a quiz."""

    title: Any = None


class QuestionPayload(BaseModel):
    """Payload schema for adding a question; field rules live in the engine."""

    model_config = ConfigDict(extra="allow")

    text: Any = None
    type: Any = None
    options: Any = None


class SubmissionPayload(BaseModel):
    """Payload schema for submitted answers."""

    answers: Any = None


def _is_missing(value: Any) -> bool:
    """Treat None, empty strings, zero and False as absent fields."""
    return value is None or (isinstance(value, (str, int, float)) and not value)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _failure(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizServiceError)
    async def handle_quiz_error(request: Request, exc: QuizServiceError) -> JSONResponse:
        status_code = 404 if exc.kind == "not_found" else 400
        return _failure(status_code, exc.message, errorKind=exc.kind)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        if any(error.get("type") == "json_invalid" for error in exc.errors()):
            return _failure(400, "Invalid JSON in request body", errorKind="validation")
        return _failure(400, "Invalid request body", errorKind="validation")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return _failure(404, "Endpoint not found", path=request.url.path, method=request.method)
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _failure(500, "Internal server error")


def _build_quiz_router(quiz_manager: QuizManager) -> APIRouter:
    router = APIRouter(prefix=f"{API_PREFIX}/quizzes")
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @router.get("/health")
    def quiz_health(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {
            "success": True,
            "message": "Quiz service is operational",
            "data": {
                "status": "healthy",
                "totalQuizzes": manager.get_quiz_count(),
                "timestamp": _now_iso(),
                "uptime": manager.get_uptime_seconds(),
            },
        }

    @router.post("", status_code=201, response_model=None)
    def create_quiz(
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object] | JSONResponse:
        if _is_missing(payload.title):
            return _failure(400, "Title is required in request body", field="title")
        quiz = manager.create_quiz(payload.title)
        summary = quiz.summary()
        return {
            "success": True,
            "message": "Quiz created successfully",
            "data": {
                "id": summary["id"],
                "title": summary["title"],
                "questionCount": 0,
                "createdAt": summary["createdAt"],
            },
        }

    @router.get("")
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quizzes = manager.get_all_quizzes()
        return {"success": True, "count": len(quizzes), "data": quizzes}

    @router.get("/{quiz_id}")
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quiz = manager.get_quiz(quiz_id)
        stats = manager.get_quiz_stats(quiz_id)
        data = quiz.summary()
        data["statistics"] = stats.to_dict()
        return {"success": True, "data": data}

    @router.patch("/{quiz_id}")
    def update_quiz_title(
        quiz_id: str,
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        quiz = manager.update_quiz_title(quiz_id, payload.title)
        return {"success": True, "message": "Quiz updated successfully", "data": quiz.summary()}

    @router.delete("/{quiz_id}")
    def delete_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        manager.delete_quiz(quiz_id)
        return {
            "success": True,
            "message": "Quiz deleted successfully",
            "data": {"deletedQuizId": quiz_id, "deletedAt": _now_iso()},
        }

    @router.post("/{quiz_id}/questions", status_code=201, response_model=None)
    def add_question(
        quiz_id: str,
        payload: QuestionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object] | JSONResponse:
        if not payload.model_fields_set and not payload.model_extra:
            return _failure(400, "Question data is required in request body")
        question_data = payload.model_dump()
        for field_name, message in _REQUIRED_QUESTION_FIELDS:
            if _is_missing(question_data.get(field_name)):
                return _failure(400, message, field=field_name)

        question = manager.add_question(quiz_id, question_data)
        return {
            "success": True,
            "message": "Question added successfully",
            "data": question.metadata(),
        }

    @router.get("/{quiz_id}/questions")
    def list_questions(
        quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)
    ) -> dict[str, object]:
        questions = manager.get_quiz_questions(quiz_id)
        return {"success": True, "count": len(questions), "data": questions}

    @router.delete("/{quiz_id}/questions/{question_id}")
    def remove_question(
        quiz_id: str,
        question_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        manager.remove_question(quiz_id, question_id)
        return {
            "success": True,
            "message": "Question removed successfully",
            "data": {"quizId": quiz_id, "deletedQuestionId": question_id},
        }

    @router.post("/{quiz_id}/submit", response_model=None)
    def submit_answers(
        quiz_id: str,
        payload: SubmissionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object] | JSONResponse:
        if payload.answers is None:
            return _failure(
                400,
                "Answers array is required in request body",
                field="answers",
                expectedFormat=[{"questionId": "string", "selectedOptionIds": ["string"]}],
            )
        result = manager.submit_quiz_answers(quiz_id, payload.answers)
        return {
            "success": True,
            "message": "Quiz submitted successfully",
            "data": result.to_dict(),
        }

    @router.get("/{quiz_id}/stats")
    def quiz_stats(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quiz = manager.get_quiz(quiz_id)
        stats = manager.get_quiz_stats(quiz_id)
        return {
            "success": True,
            "data": {"quizId": quiz.id, "quizTitle": quiz.title, "statistics": stats.to_dict()},
        }

    return router


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    if APP_ENV != "production":

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.info("%s %s", request.method, request.url.path)
            return await call_next(request)

    _register_error_handlers(app)

    @app.get("/")
    def root() -> dict[str, object]:
        return {
            "success": True,
            "message": f"{APP_NAME} API",
            "version": APP_VERSION,
            "endpoints": {
                "health": f"{API_PREFIX}/health",
                "quizzes": f"{API_PREFIX}/quizzes",
                "documentation": f"{API_PREFIX}/docs",
            },
        }

    @app.get(f"{API_PREFIX}/health")
    def health() -> dict[str, object]:
        return {
            "success": True,
            "status": "healthy",
            "timestamp": _now_iso(),
            "uptime": quiz_manager.get_uptime_seconds(),
        }

    @app.get(f"{API_PREFIX}/docs")
    def documentation() -> dict[str, object]:
        return {"success": True, "documentation": API_DOCUMENTATION}

    app.include_router(_build_quiz_router(quiz_manager))
    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until the process is stopped."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the API on a background daemon thread for embedding hosts."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    logger.info("API server thread started on %s:%s", host, port)
    return thread
