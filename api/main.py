import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.config import Settings
from core.db import Database, DatabaseError
from feedback import router as feedback_router
from feedback.service import FeedbackService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One pool per process.
        try:
            database = await Database.open(settings)
        except Exception:
            logger.exception("failed to open database")
            raise
        app.state.feedback_service = FeedbackService(database)
        try:
            yield
        finally:
            app.state.feedback_service = None
            try:
                await database.close()
            except DatabaseError:
                logger.exception("failed to close database")
                raise

    app = FastAPI(lifespan=lifespan)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request method=%s path=%s status=%s duration_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        logger.error(
            "storage_failed method=%s path=%s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=503, content={"detail": "Storage is unavailable."})

    app.include_router(feedback_router.router, tags=["feedback"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    settings = Settings.from_env()
    # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown.
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
