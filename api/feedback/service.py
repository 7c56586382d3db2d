"""
Feedback business logic.

Scope:
- survey question catalog (list/create/edit)
- bulk feedback ingestion
- per-teaching assessment (average rating), computed on every read
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Protocol

from core import ids
from core.db import Database, NoRowsError

from . import repository
from .entities import Assessment, Feedback, Question, utc_now

logger = logging.getLogger(__name__)


class QuestionUnknownError(LookupError):
    pass


class InvalidFeedbackError(ValueError):
    pass


class FeedbackInput(Protocol):
    teaching_id: str
    question_id: str
    rating: Decimal


class FeedbackService:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_questions(self, *, only_enabled: bool = False) -> list[Question]:
        questions = await repository.find_all_questions(self._db)
        if only_enabled:
            return [q for q in questions if q.enabled]
        return questions

    async def create_question(self, title: str, enabled: bool, *, updated_by: str = "") -> Question:
        question = Question(
            id=ids.new_id(),
            title=title,
            enabled=enabled,
            updated_by=updated_by,
            updated_at=utc_now(),
        )
        await repository.store_question(self._db, question)
        logger.info("question_created id=%s enabled=%s", question.id, question.enabled)
        return question

    async def update_question(self, question_id: str, title: str, enabled: bool) -> Question:
        try:
            current = await repository.find_question_by_id(self._db, question_id)
        except NoRowsError as exc:
            raise QuestionUnknownError(f"Unknown question: {question_id}") from exc

        question = current.edit(title, enabled)
        await repository.update_question(self._db, question)
        logger.info("question_updated id=%s enabled=%s", question.id, question.enabled)
        return question

    async def bulk_ingest_feedback(self, items: Iterable[FeedbackInput]) -> int:
        """
        Store a feedback batch with one INSERT. Returns the number of rows.

        The whole batch is validated first; nothing is written if any item
        lacks a teaching or question id.
        """
        feedbacks: list[Feedback] = []
        for index, item in enumerate(items):
            teaching_id = (item.teaching_id or "").strip()
            question_id = (item.question_id or "").strip()
            if not teaching_id or not question_id:
                raise InvalidFeedbackError(
                    f"Feedback #{index} requires both teaching id and question id."
                )
            feedbacks.append(
                Feedback(
                    id=ids.new_id(),
                    teaching_id=teaching_id,
                    question_id=question_id,
                    rating=Decimal(str(item.rating)),
                )
            )

        stored = await repository.bulk_store_feedback(self._db, feedbacks)
        logger.info("feedback_stored count=%s", stored)
        return stored

    async def list_assessments(self) -> list[Assessment]:
        return await repository.find_all_assessments(self._db)
