import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from exam_evaluator.database.store import ResultStore
from exam_evaluator.exceptions import InvalidResultError
from exam_evaluator.routes.dependencies import get_query_service, get_store
from exam_evaluator.schemas import ExamConfig, ExamResult, SessionProgress, StatusBreakdown
from exam_evaluator.services.query_service import ResultQueryService, status_breakdown
from exam_evaluator.services.report_service import generate_report

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/results", tags=["results"])


@router.get("", response_model=List[ExamResult])
def list_all_results(store: ResultStore = Depends(get_store)):
    """Get every stored result"""
    return store.get_all()


@router.post("", response_model=ExamResult, status_code=201)
def save_result(payload: Dict[str, Any] = Body(...), store: ResultStore = Depends(get_store)):
    """Save a graded result, replacing an earlier grade of the same exam"""
    try:
        return store.save(payload)
    except InvalidResultError as e:
        logger.error(f"Rejected result: {str(e)}")
        raise HTTPException(status_code=422, detail=f"Invalid result: {str(e)}")


@router.delete("", status_code=204)
def clear_all_results(store: ResultStore = Depends(get_store)):
    """Delete every stored result"""
    store.clear_all()
    return Response(status_code=204)


@router.get("/session", response_model=List[ExamResult])
def session_results(subject_code: str, exam_name: str, class_name: str, semester: str,
                    queries: ResultQueryService = Depends(get_query_service)):
    """Results of the exam session currently open"""
    return queries.find_by_session(subject_code, exam_name, class_name, semester)


@router.get("/session/progress", response_model=SessionProgress)
def session_progress(subject_code: str, exam_name: str, class_name: str, semester: str,
                     total_students: Optional[int] = Query(None, ge=0),
                     queries: ResultQueryService = Depends(get_query_service)):
    """How many students of the session have been graded"""
    config = ExamConfig(
        subject_code=subject_code,
        exam_name=exam_name,
        class_name=class_name,
        semester=semester,
        total_students=total_students,
    )
    return queries.session_progress(config)


@router.get("/history", response_model=List[ExamResult])
def student_history(usn: str, name: str = "",
                    queries: ResultQueryService = Depends(get_query_service)):
    """All results of a student, newest first"""
    return queries.find_history(name, usn)


@router.get("/latest", response_model=ExamResult)
def latest_result(usn: str, name: str = "",
                  queries: ResultQueryService = Depends(get_query_service)):
    """The most recent result of a student"""
    result = queries.find_latest(name, usn)
    if result is None:
        raise HTTPException(status_code=404, detail="No result found")
    return result


@router.get("/latest/breakdown", response_model=StatusBreakdown)
def latest_result_breakdown(usn: str, name: str = "",
                            queries: ResultQueryService = Depends(get_query_service)):
    """Correct / incorrect / partial counts of the most recent result"""
    result = queries.find_latest(name, usn)
    if result is None:
        raise HTTPException(status_code=404, detail="No result found")
    return status_breakdown(result)


@router.get("/report")
def download_report(subject_code: Optional[str] = None, exam_name: Optional[str] = None,
                    class_name: Optional[str] = None, semester: Optional[str] = None,
                    store: ResultStore = Depends(get_store),
                    queries: ResultQueryService = Depends(get_query_service)):
    """Download results as CSV, either for one session or for everything stored"""
    session = [subject_code, exam_name, class_name, semester]
    if all(v is None for v in session):
        results = store.get_all()
    elif any(v is None for v in session):
        raise HTTPException(
            status_code=400,
            detail="subject_code, exam_name, class_name and semester must be given together",
        )
    else:
        results = queries.find_by_session(subject_code, exam_name, class_name, semester)

    report = generate_report(results)
    logger.info(f"Exported {len(results)} result(s) to {report.filename}")
    return Response(
        content=report.content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )
