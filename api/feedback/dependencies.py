"""
Feedback dependencies for FastAPI routes.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from .service import FeedbackService


def get_service(request: Request) -> FeedbackService:
    service = getattr(request.app.state, "feedback_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not initialized.",
        )
    return service
