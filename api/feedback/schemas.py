"""
Pydantic schemas for feedback endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from core.db import MAX_BIND_PARAMS

from .repository import FEEDBACK_COLUMNS

# One batch is one INSERT, so it must fit the bind parameter limit.
MAX_FEEDBACK_BATCH = MAX_BIND_PARAMS // len(FEEDBACK_COLUMNS)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuestionRequest(_CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    enable: bool = False
    updated_by: str = Field(default="", alias="updatedBy", max_length=200)


class QuestionUpdateRequest(_CamelModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(..., min_length=1, max_length=500)
    enable: bool = False


class QuestionResponse(_CamelModel):
    id: str
    title: str
    enable: bool
    updated_by: str = Field(alias="updatedBy")
    updated_at: datetime = Field(alias="updatedAt")


class FeedbackItem(_CamelModel):
    teaching_id: str = Field(..., alias="teachingId", min_length=1, max_length=200)
    question_id: str = Field(..., alias="questionId", min_length=1, max_length=200)
    rating: Decimal


class FeedbackBatchRequest(_CamelModel):
    # Clients send the batch under "assessments".
    assessments: list[FeedbackItem] = Field(default_factory=list, max_length=MAX_FEEDBACK_BATCH)


class AssessmentResponse(_CamelModel):
    teaching_id: str = Field(alias="teachingId")
    rating: Decimal
