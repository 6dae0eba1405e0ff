"""
Unit Tests for the result models
"""

import pytest
from pydantic import ValidationError

from exam_evaluator.schemas import ExamResult, GradedQuestion, QuestionStatus


def question(**overrides):
    data = {
        "questionNumber": "1a",
        "studentAnswer": "42",
        "marksAwarded": 2,
        "maxMarks": 2,
        "status": "Correct",
    }
    data.update(overrides)
    return GradedQuestion.model_validate(data)


class TestGradedQuestion:

    def test_init_when_camel_case_keys_then_parsed(self):
        q = question()
        assert q.question_number == "1a"
        assert q.status is QuestionStatus.CORRECT

    def test_init_when_snake_case_keys_then_parsed(self):
        q = GradedQuestion(question_number="2", student_answer="x", marks_awarded=0,
                           max_marks=1, status="Incorrect")
        assert q.status is QuestionStatus.INCORRECT

    def test_init_when_status_unknown_then_raises(self):
        with pytest.raises(ValidationError):
            question(status="Excellent")

    def test_init_when_marks_exceed_max_then_raises(self):
        with pytest.raises(ValidationError, match="exceeds maxMarks"):
            question(marksAwarded=3, maxMarks=2)

    def test_init_when_max_marks_missing_then_no_bound(self):
        assert question(maxMarks=None, marksAwarded=5).marks_awarded == 5

    def test_init_when_negative_marks_then_raises(self):
        with pytest.raises(ValidationError):
            question(marksAwarded=-1)

    def test_init_when_frozen_then_immutable(self):
        q = question()
        with pytest.raises(ValidationError):
            q.feedback = "changed"


class TestExamResult:

    def test_to_record_when_optional_fields_missing_then_omitted(self, result_factory):
        record = result_factory(teacherName=None).to_record()
        assert "teacherName" not in record
        assert "timestamp" not in record
        assert record["questions"][1]["status"] == "Partial"

    def test_validate_when_unknown_keys_then_ignored(self, result_factory):
        record = result_factory().to_record()
        record["legacyField"] = "whatever"
        assert ExamResult.model_validate(record).usn == "1RV19CS001"

    def test_validate_when_required_totals_missing_then_raises(self):
        with pytest.raises(ValidationError):
            ExamResult.model_validate({"questions": []})

    def test_validate_when_summary_missing_then_empty_string(self):
        result = ExamResult.model_validate({
            "totalQuestions": 0, "totalMarksObtained": 0, "accuracyPercentage": 0, "questions": [],
        })
        assert result.summary == ""
