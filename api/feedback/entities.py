"""
Feedback domain entities.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Question:
    id: str
    title: str
    enabled: bool
    updated_by: str
    updated_at: datetime

    def edit(self, title: str, enabled: bool) -> Question:
        # NOTE: `updated_by` is blanked on every edit. Kept as-is until the
        # product side says who the editor should be.
        return replace(
            self,
            title=title,
            enabled=enabled,
            updated_by="",
            updated_at=utc_now(),
        )


@dataclass(frozen=True)
class Feedback:
    id: str
    teaching_id: str
    question_id: str
    rating: Decimal


@dataclass(frozen=True)
class Assessment:
    teaching_id: str
    rating: Decimal
