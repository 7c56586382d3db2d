"""
Feedback API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from . import schemas
from .dependencies import get_service
from .entities import Assessment, Question
from .service import FeedbackService, InvalidFeedbackError, QuestionUnknownError

router = APIRouter(prefix="/api/v1")


def _to_question_response(question: Question) -> schemas.QuestionResponse:
    return schemas.QuestionResponse(
        id=question.id,
        title=question.title,
        enable=question.enabled,
        updated_by=question.updated_by,
        updated_at=question.updated_at,
    )


def _to_assessment_response(assessment: Assessment) -> schemas.AssessmentResponse:
    return schemas.AssessmentResponse(
        teaching_id=assessment.teaching_id,
        rating=assessment.rating,
    )


@router.get("/getting")
async def getting() -> dict:
    return {"message": "Hello from the feedback api"}


@router.get("/questions", response_model=list[schemas.QuestionResponse])
async def list_questions(
    q: str = Query(default="", max_length=100),
    service: FeedbackService = Depends(get_service),
) -> list[schemas.QuestionResponse]:
    """
    List questions. `?q=enable` (any case) keeps only enabled ones.
    """
    only_enabled = q.strip().lower() == "enable"
    questions = await service.list_questions(only_enabled=only_enabled)
    return [_to_question_response(question) for question in questions]


@router.post(
    "/questions",
    response_model=schemas.QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_question(
    request: schemas.QuestionRequest,
    service: FeedbackService = Depends(get_service),
) -> schemas.QuestionResponse:
    question = await service.create_question(
        request.title,
        request.enable,
        updated_by=request.updated_by,
    )
    return _to_question_response(question)


@router.put(
    "/questions/{question_id}",
    response_model=schemas.QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def update_question(
    question_id: str,
    request: schemas.QuestionUpdateRequest,
    service: FeedbackService = Depends(get_service),
) -> schemas.QuestionResponse:
    try:
        question = await service.update_question(question_id, request.title, request.enable)
    except QuestionUnknownError as exc:
        raise HTTPException(status_code=404, detail="Question not found.") from exc
    return _to_question_response(question)


@router.post("/feedbacks", status_code=status.HTTP_201_CREATED)
async def create_feedbacks(
    request: schemas.FeedbackBatchRequest,
    service: FeedbackService = Depends(get_service),
) -> Response:
    try:
        await service.bulk_ingest_feedback(request.assessments)
    except InvalidFeedbackError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/assessments", response_model=list[schemas.AssessmentResponse])
async def list_assessments(
    service: FeedbackService = Depends(get_service),
) -> list[schemas.AssessmentResponse]:
    assessments = await service.list_assessments()
    return [_to_assessment_response(assessment) for assessment in assessments]
