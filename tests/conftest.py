import itertools

import pytest

from exam_evaluator.database.backends import InMemoryStorage
from exam_evaluator.database.store import ResultStore
from exam_evaluator.schemas import ExamResult


class StepClock:
    """Deterministic clock returning strictly increasing epoch milliseconds."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self._ticks = itertools.count(start, step)
        self.last = None

    def __call__(self) -> int:
        self.last = next(self._ticks)
        return self.last


def make_result(**overrides) -> ExamResult:
    """Build a valid ExamResult; keyword arguments override the defaults."""
    data = {
        "studentName": "Jane Doe",
        "usn": "1RV19CS001",
        "className": "CSE-A",
        "semester": "5",
        "subjectCode": "CS501",
        "examName": "Midterm1",
        "teacherName": "Dr. Smith",
        "totalQuestions": 2,
        "totalMaxMarks": 10,
        "totalMarksObtained": 8,
        "accuracyPercentage": 80,
        "summary": "Solid attempt.",
        "questions": [
            {
                "questionNumber": "1",
                "questionText": "Define an operating system.",
                "studentAnswer": "Software that manages hardware.",
                "correctAnswer": "System software managing hardware and resources.",
                "marksAwarded": 5,
                "maxMarks": 5,
                "status": "Correct",
                "feedback": "Accurate.",
            },
            {
                "questionNumber": "2",
                "questionText": "What is a process?",
                "studentAnswer": "A program.",
                "correctAnswer": "A program in execution.",
                "marksAwarded": 3,
                "maxMarks": 5,
                "status": "Partial",
                "feedback": "Missing 'in execution'.",
            },
        ],
    }
    data.update(overrides)
    return ExamResult.model_validate(data)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, clock):
    return ResultStore(storage, clock=clock)


@pytest.fixture
def result_factory():
    return make_result
