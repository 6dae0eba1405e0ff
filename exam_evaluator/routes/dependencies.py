from fastapi import Depends, Request

from exam_evaluator.database.store import ResultStore
from exam_evaluator.services.evaluation_service import ExamEvaluator
from exam_evaluator.services.query_service import ResultQueryService


def get_store(request: Request) -> ResultStore:
    return request.app.state.store


def get_query_service(store: ResultStore = Depends(get_store)) -> ResultQueryService:
    return ResultQueryService(store)


def get_evaluator(request: Request) -> ExamEvaluator:
    return request.app.state.evaluator
