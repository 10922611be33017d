"""FastAPI server exposing the admin and participant endpoints."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
import uvicorn

from live_quiz.constants.about import APP_DESCRIPTION, APP_NAME, APP_VERSION
from live_quiz.constants.network_constants import API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from live_quiz.core.errors import ConflictError, InvalidQuestionError, NotFoundError
from live_quiz.core.markdown_renderer import renderer
from live_quiz.core.models import CurrentQuestionView, ParticipantWithAnswers, QuizWithQuestions
from live_quiz.core.question_importer import QuestionImportError
from live_quiz.core.quiz_manager import QuizManager
from live_quiz.server.join_link import build_join_link
from live_quiz.server.schemas import (
    AnswerCreatePayload,
    AnswerOut,
    CurrentQuestionOut,
    JoinLinkOut,
    LeaderboardEntryOut,
    MessageOut,
    ParticipantCreatePayload,
    ParticipantDetailOut,
    ParticipantOut,
    ParticipantUpdatePayload,
    PublicQuestionOut,
    QuestionCreatePayload,
    QuestionImportPayload,
    QuestionOut,
    QuestionUpdatePayload,
    QuizCreatePayload,
    QuizDetailOut,
    QuizOut,
    QuizUpdatePayload,
)

logger = logging.getLogger(__name__)

# Question fields that may legitimately be cleared with an explicit null.
_NULLABLE_QUESTION_FIELDS = {"time_limit", "options"}


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _quiz_detail(view: QuizWithQuestions) -> QuizDetailOut:
    return QuizDetailOut(
        **QuizOut.model_validate(view.quiz).model_dump(),
        questions=[QuestionOut.model_validate(q) for q in view.questions],
        participant_count=view.participant_count,
    )


def _participant_detail(view: ParticipantWithAnswers) -> ParticipantDetailOut:
    return ParticipantDetailOut(
        **ParticipantOut.model_validate(view.participant).model_dump(),
        answers=[AnswerOut.model_validate(a) for a in view.answers],
        rank=view.rank,
    )


def _current_question(view: CurrentQuestionView) -> CurrentQuestionOut:
    question = None
    if view.question is not None:
        rendered = renderer.render_question(view.question)
        question = PublicQuestionOut(
            id=view.question.id,
            question_number=view.question.question_number,
            type=view.question.type,
            question=view.question.question,
            question_html=rendered.question_html,
            options=view.question.options,
            options_html=rendered.options_html,
            marks=view.question.marks,
        )
    return CurrentQuestionOut(
        quiz_id=view.quiz_id,
        status=view.status,
        current_question=view.current_question,
        position=view.position,
        total_questions=view.total_questions,
        question=question,
        time_limit=view.time_limit,
        question_started_at=view.question_started_at,
        remaining_seconds=view.remaining_seconds,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(
                {"message": "Invalid request data", "errors": exc.errors(), "body": exc.body}
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"message": str(exc)})

    @app.exception_handler(InvalidQuestionError)
    async def handle_invalid_question(request: Request, exc: InvalidQuestionError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(QuestionImportError)
    async def handle_import_error(request: Request, exc: QuestionImportError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_api_app(quiz_manager: QuizManager, public_host: str) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager.

    ``public_host`` is the host (optionally with port) participants use to
    reach the quiz; it appears in join links and QR codes.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down; cancelling pending quiz timers")
        quiz_manager.shutdown()

    app = FastAPI(
        title=f"{APP_NAME} API",
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    _register_exception_handlers(app)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    router = APIRouter(prefix=API_PREFIX)

    # --- Quizzes ---

    @router.post("/quizzes", response_model=QuizOut)
    def create_quiz(
        payload: QuizCreatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuizOut:
        quiz = manager.create_quiz(
            title=payload.title,
            duration=payload.duration,
            start_date=payload.start_date,
            start_time=payload.start_time,
            default_time_per_question=payload.default_time_per_question,
            timer_type=payload.timer_type,
        )
        return QuizOut.model_validate(quiz)

    @router.get("/quizzes", response_model=list[QuizOut])
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[QuizOut]:
        return [QuizOut.model_validate(quiz) for quiz in manager.list_quizzes()]

    @router.get("/quizzes/{quiz_id}", response_model=QuizDetailOut)
    def get_quiz(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizDetailOut:
        return _quiz_detail(manager.get_quiz_with_questions(quiz_id))

    @router.patch("/quizzes/{quiz_id}", response_model=QuizOut)
    def update_quiz(
        quiz_id: int,
        payload: QuizUpdatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuizOut:
        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }
        return QuizOut.model_validate(manager.update_quiz(quiz_id, updates))

    @router.post("/quizzes/{quiz_id}/start", response_model=QuizOut)
    def start_quiz(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizOut:
        return QuizOut.model_validate(manager.start_quiz(quiz_id))

    @router.post("/quizzes/{quiz_id}/next", response_model=QuizOut)
    def next_question(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizOut:
        return QuizOut.model_validate(manager.next_question(quiz_id))

    @router.post("/quizzes/{quiz_id}/end", response_model=QuizOut)
    def end_quiz(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizOut:
        return QuizOut.model_validate(manager.end_quiz(quiz_id))

    @router.get("/quizzes/{quiz_id}/current", response_model=CurrentQuestionOut)
    def get_current_question(
        quiz_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> CurrentQuestionOut:
        return _current_question(manager.get_current_question_view(quiz_id))

    @router.get("/quizzes/{quiz_id}/qr", response_model=JoinLinkOut)
    def get_join_qr(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> JoinLinkOut:
        manager.get_quiz(quiz_id)
        link = build_join_link(public_host, quiz_id)
        return JoinLinkOut(
            url=link.url,
            qr_data=link.qr_data,
            qr_code_data_url=link.qr_code_data_url,
            image=link.qr_code_data_url,
        )

    # --- Questions ---

    @router.post("/questions", response_model=QuestionOut)
    def create_question(
        payload: QuestionCreatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuestionOut:
        question = manager.add_question(
            quiz_id=payload.quiz_id,
            question_type=payload.type,
            question=payload.question,
            correct_answer=payload.correct_answer,
            question_number=payload.question_number,
            options=payload.options,
            marks=payload.marks,
            time_limit=payload.time_limit,
        )
        return QuestionOut.model_validate(question)

    @router.get("/quizzes/{quiz_id}/questions", response_model=list[QuestionOut])
    def list_questions(
        quiz_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[QuestionOut]:
        return [QuestionOut.model_validate(q) for q in manager.list_questions(quiz_id)]

    @router.post("/quizzes/{quiz_id}/questions/import", response_model=list[QuestionOut])
    def import_questions(
        quiz_id: int,
        payload: QuestionImportPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[QuestionOut]:
        created = manager.import_questions(quiz_id, payload.text)
        return [QuestionOut.model_validate(q) for q in created]

    @router.get("/quizzes/{quiz_id}/questions/export", response_class=PlainTextResponse)
    def export_questions(quiz_id: int, manager: QuizManager = Depends(quiz_manager_dep)) -> str:
        return manager.export_questions(quiz_id)

    @router.get("/questions/{question_id}", response_model=QuestionOut)
    def get_question(
        question_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuestionOut:
        return QuestionOut.model_validate(manager.get_question(question_id))

    @router.patch("/questions/{question_id}", response_model=QuestionOut)
    def update_question(
        question_id: int,
        payload: QuestionUpdatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuestionOut:
        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_QUESTION_FIELDS
        }
        return QuestionOut.model_validate(manager.update_question(question_id, updates))

    @router.delete("/questions/{question_id}", response_model=MessageOut)
    def delete_question(
        question_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> MessageOut:
        if not manager.delete_question(question_id):
            raise NotFoundError("Question", question_id)
        return MessageOut(message="Question deleted successfully")

    # --- Participants ---

    @router.post("/participants", response_model=ParticipantOut)
    def register_participant(
        payload: ParticipantCreatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> ParticipantOut:
        participant = manager.register_participant(
            quiz_id=payload.quiz_id,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
        )
        return ParticipantOut.model_validate(participant)

    @router.get("/quizzes/{quiz_id}/participants", response_model=list[ParticipantOut])
    def list_participants(
        quiz_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[ParticipantOut]:
        return [ParticipantOut.model_validate(p) for p in manager.list_participants(quiz_id)]

    @router.get("/participants/{participant_id}", response_model=ParticipantDetailOut)
    def get_participant(
        participant_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> ParticipantDetailOut:
        return _participant_detail(manager.get_participant_with_answers(participant_id))

    @router.patch("/participants/{participant_id}", response_model=ParticipantOut)
    def update_participant(
        participant_id: int,
        payload: ParticipantUpdatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> ParticipantOut:
        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }
        return ParticipantOut.model_validate(manager.update_participant(participant_id, updates))

    @router.get("/participants/{participant_id}/answers", response_model=list[AnswerOut])
    def list_participant_answers(
        participant_id: int,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[AnswerOut]:
        return [AnswerOut.model_validate(a) for a in manager.get_participant_answers(participant_id)]

    # --- Answers & leaderboard ---

    @router.post("/answers", response_model=AnswerOut)
    def submit_answer(
        payload: AnswerCreatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> AnswerOut:
        answer = manager.submit_answer(
            participant_id=payload.participant_id,
            question_id=payload.question_id,
            answer=payload.answer,
            time_spent=payload.time_spent,
        )
        return AnswerOut.model_validate(answer)

    @router.get("/quizzes/{quiz_id}/leaderboard", response_model=list[LeaderboardEntryOut])
    def get_leaderboard(
        quiz_id: int,
        limit: int | None = Query(default=None, ge=1),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[LeaderboardEntryOut]:
        entries = manager.get_leaderboard(quiz_id, limit=limit)
        return [LeaderboardEntryOut.model_validate(entry) for entry in entries]

    app.include_router(router)
    return app


def run_api_server(
    quiz_manager: QuizManager,
    public_host: str,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API with uvicorn until interrupted."""
    app = create_api_app(quiz_manager, public_host)
    # Route uvicorn through the handlers set up by configure_logging.
    config = uvicorn.Config(app=app, host=host, port=port, log_config=None, log_level=None)
    server = uvicorn.Server(config)
    server.run()
