"""
Builds the class report CSV downloaded from the teacher's session table.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from exam_evaluator.config import REPORT_DATE_FORMAT, REPORT_FILENAME_PREFIX
from exam_evaluator.schemas import ExamResult

REPORT_COLUMNS = [
    "Date", "Exam Name", "Class", "Semester", "Subject Code", "Student Name",
    "USN", "Total Marks", "Marks Obtained", "Accuracy (%)", "Summary",
]

MISSING = "N/A"
UNKNOWN_STUDENT = "Unknown"


@dataclass(frozen=True)
class ClassReport:
    filename: str
    content: str


def generate_report(results: Iterable[ExamResult],
                    filename_prefix: str = REPORT_FILENAME_PREFIX,
                    today: Optional[date] = None) -> ClassReport:
    """
    Render results as comma-separated text, one row per result in the given order.

    Only the summary is quoted; every other column is either numeric or a
    short identifier.
    """
    today = today or date.today()
    lines = [",".join(REPORT_COLUMNS)]
    for r in results:
        row = [
            _format_date(r.timestamp, today),
            r.exam_name or MISSING,
            r.class_name or MISSING,
            r.semester or MISSING,
            r.subject_code or MISSING,
            r.student_name or UNKNOWN_STUDENT,
            r.usn or MISSING,
            _format_number(r.total_max_marks),
            _format_number(r.total_marks_obtained),
            _format_number(r.accuracy_percentage),
            _quote(r.summary),
        ]
        lines.append(",".join(row))

    return ClassReport(
        filename=f"{filename_prefix}_{today.isoformat()}.csv",
        content="\n".join(lines),
    )


def _format_date(timestamp: Optional[int], today: date) -> str:
    if timestamp:
        return datetime.fromtimestamp(timestamp / 1000).strftime(REPORT_DATE_FORMAT)
    return today.strftime(REPORT_DATE_FORMAT)


def _format_number(value: Union[int, float, None]) -> str:
    if value is None:
        return MISSING
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(text: Optional[str]) -> str:
    return '"' + (text or "").replace('"', '""') + '"'
