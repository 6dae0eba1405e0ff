import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exam_evaluator.config import API_TITLE, API_VERSION, DATA_DIR, STORAGE_KEY
from exam_evaluator.database.backends import JsonFileStorage
from exam_evaluator.database.store import ResultStore
from exam_evaluator.exceptions import CorruptStateError, StorageError
from exam_evaluator.routes import grading_routes, result_routes
from exam_evaluator.services.evaluation_service import ExamEvaluator

logger = logging.getLogger(__name__)


def create_app(store: Optional[ResultStore] = None,
               evaluator: Optional[ExamEvaluator] = None) -> FastAPI:
    """
    Build the application. The store and the evaluator default to the
    JSON-file store under DATA_DIR and a Gemini-backed evaluator.
    """
    app = FastAPI(title=API_TITLE, version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or ResultStore(JsonFileStorage(DATA_DIR), key=STORAGE_KEY)
    app.state.evaluator = evaluator or ExamEvaluator()

    app.include_router(grading_routes.router)
    app.include_router(result_routes.router)

    @app.exception_handler(CorruptStateError)
    async def corrupt_state_handler(request: Request, exc: CorruptStateError):
        logger.error(f"Stored results are unreadable: {str(exc)}")
        return JSONResponse(status_code=500, content={"detail": "Could not load results"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure: {str(exc)}")
        return JSONResponse(status_code=500, content={"detail": "Could not load/save results"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
