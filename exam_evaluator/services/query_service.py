import logging
from typing import List, Optional

from exam_evaluator.database.store import ResultStore
from exam_evaluator.schemas import (
    ExamConfig, ExamResult, QuestionStatus, SessionProgress, StatusBreakdown
)

logger = logging.getLogger(__name__)


class ResultQueryService:
    """Read-only views over the result store. Nothing is cached."""

    def __init__(self, store: ResultStore):
        self.store = store

    def find_history(self, name: str, usn: str) -> List[ExamResult]:
        """
        All results of one student, newest first.

        The usn must match case-insensitively after trimming. The name only
        has to be contained in the stored name, ignoring case, so an empty
        name matches every record for the usn.
        """
        usn_query = usn.strip().lower()
        name_query = name.strip().lower()

        matches = [
            r for r in self.store.get_all()
            if (r.usn or "").strip().lower() == usn_query
            and _name_contains(r.student_name, name_query)
        ]
        matches.sort(key=lambda r: r.timestamp or 0, reverse=True)

        logger.info(f"History lookup for usn={usn_query!r} returned {len(matches)} result(s)")
        return matches

    def find_latest(self, name: str, usn: str) -> Optional[ExamResult]:
        history = self.find_history(name, usn)
        return history[0] if history else None

    def find_by_session(self, subject_code: str, exam_name: str,
                        class_name: str, semester: str) -> List[ExamResult]:
        """Results whose four session fields equal the query exactly."""
        return [
            r for r in self.store.get_all()
            if r.subject_code == subject_code
            and r.exam_name == exam_name
            and r.class_name == class_name
            and r.semester == semester
        ]

    def session_progress(self, config: ExamConfig) -> SessionProgress:
        graded = len(self.find_by_session(
            config.subject_code, config.exam_name, config.class_name, config.semester
        ))
        remaining = None
        if config.total_students is not None:
            remaining = max(config.total_students - graded, 0)
        return SessionProgress(graded=graded, total_students=config.total_students, remaining=remaining)


def status_breakdown(result: ExamResult) -> StatusBreakdown:
    """Count the questions of a result by grading status."""
    counts = {status: 0 for status in QuestionStatus}
    for question in result.questions:
        counts[question.status] += 1
    return StatusBreakdown(
        correct=counts[QuestionStatus.CORRECT],
        incorrect=counts[QuestionStatus.INCORRECT],
        partial=counts[QuestionStatus.PARTIAL],
    )


def _name_contains(stored_name: Optional[str], name_query: str) -> bool:
    if stored_name is None:
        return name_query == ""
    return name_query in stored_name.lower()
