"""
Feedback persistence (raw SQL through `core.sql` builders).

Column lists below are the single source of truth for column order: the
insert/select builders and the row scanners all follow them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

from core import sql
from core.db import Database

from .entities import Assessment, Feedback, Question

QUESTIONS_TABLE = "questions"
FEEDBACK_TABLE = "feedback_remarks"

QUESTION_COLUMNS = (
    "id",
    "title",
    "is_display",
    "updated_by",
    "updated_at",
)

FEEDBACK_COLUMNS = (
    "id",
    "teaching_id",
    "question_id",
    "rating",
)

ASSESSMENT_COLUMNS = (
    "teaching_id",
    "SUM(rating)/COUNT(id)",
)


def scan_question(values: Sequence[Any]) -> Question:
    id_, title, enabled, updated_by, updated_at = values
    return Question(
        id=str(id_),
        title=str(title),
        enabled=bool(enabled),
        updated_by=str(updated_by or ""),
        updated_at=updated_at,
    )


def scan_assessment(values: Sequence[Any]) -> Assessment:
    teaching_id, rating = values
    return Assessment(teaching_id=str(teaching_id), rating=Decimal(rating))


async def store_question(db: Database, question: Question) -> None:
    statement = sql.insert(
        QUESTIONS_TABLE,
        QUESTION_COLUMNS,
        (
            question.id,
            question.title,
            question.enabled,
            question.updated_by,
            question.updated_at,
        ),
    )
    await db.execute(statement.text, *statement.args)


async def update_question(db: Database, question: Question) -> int:
    statement = sql.update(
        QUESTIONS_TABLE,
        [
            ("title", question.title),
            ("is_display", question.enabled),
            ("updated_by", question.updated_by),
            ("updated_at", question.updated_at),
        ],
        where={"id": question.id},
    )
    return await db.execute(statement.text, *statement.args)


async def find_all_questions(db: Database) -> list[Question]:
    statement = sql.select(QUESTION_COLUMNS, QUESTIONS_TABLE)

    questions: list[Question] = []
    await db.run_query(
        statement.text,
        lambda record: questions.append(scan_question(record)),
        *statement.args,
    )
    return questions


async def find_question_by_id(db: Database, question_id: str) -> Question:
    """
    Raises `core.db.NoRowsError` when no question has this id.
    """
    statement = sql.select(
        QUESTION_COLUMNS,
        QUESTIONS_TABLE,
        where={"id": question_id},
        limit=1,
    )
    row = await db.query_row(statement.text, *statement.args)
    return row.scan(scan_question)


async def bulk_store_feedback(db: Database, feedbacks: Sequence[Feedback]) -> int:
    values: list[Any] = []
    for item in feedbacks:
        values.extend((item.id, item.teaching_id, item.question_id, item.rating))
    return await db.bulk_insert(FEEDBACK_TABLE, FEEDBACK_COLUMNS, values)


async def find_all_assessments(db: Database) -> list[Assessment]:
    statement = sql.select(
        ASSESSMENT_COLUMNS,
        FEEDBACK_TABLE,
        group_by=("teaching_id",),
    )

    assessments: list[Assessment] = []
    await db.run_query(
        statement.text,
        lambda record: assessments.append(scan_assessment(record)),
        *statement.args,
    )
    return assessments
