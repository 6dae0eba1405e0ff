import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from exam_evaluator.exceptions import EvaluationError
from exam_evaluator.routes.dependencies import get_evaluator
from exam_evaluator.schemas import ExamConfig, ExamResult
from exam_evaluator.services.evaluation_service import ExamEvaluator
from exam_evaluator.utils.file_utils import read_upload_file

logger = logging.getLogger(__name__)
router = APIRouter(tags=["grading"])


@router.post("/grade", response_model=ExamResult)
async def grade(
    question_paper: UploadFile = File(...),
    answer_key: UploadFile = File(...),
    student_sheet: UploadFile = File(...),
    student_name: str = Form(...),
    usn: str = Form(...),
    subject_code: str = Form(...),
    exam_name: str = Form(...),
    class_name: str = Form(...),
    semester: str = Form(...),
    teacher_name: Optional[str] = Form(None),
    evaluator: ExamEvaluator = Depends(get_evaluator),
):
    """
    Grade one student's answer sheet against the session's question paper and key.

    The graded result is returned for review and is not saved; POST it to
    /results to keep it.
    """
    documents = []
    for upload in (question_paper, answer_key, student_sheet):
        success, document, error_message = await read_upload_file(upload)
        if not success:
            raise HTTPException(status_code=400, detail=error_message)
        documents.append(document)

    session = ExamConfig(
        teacher_name=teacher_name,
        subject_code=subject_code,
        exam_name=exam_name,
        class_name=class_name,
        semester=semester,
    )

    try:
        result = await evaluator.evaluate(
            *documents,
            student_name=student_name.strip(),
            usn=usn.strip(),
            session=session,
        )
    except EvaluationError as e:
        logger.error(f"Evaluation failed for usn={usn!r}: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Evaluation failed: {str(e)}")

    logger.info(
        f"Graded usn={result.usn!r}: {result.total_marks_obtained}/{result.total_max_marks}"
    )
    return result
