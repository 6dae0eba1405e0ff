from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# 9999-12-31T00:00:00Z, the last date datetime can render in any timezone
MAX_TIMESTAMP_MS = 253402214400000


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys used by the stored JSON and the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class QuestionStatus(str, Enum):
    CORRECT = "Correct"
    INCORRECT = "Incorrect"
    PARTIAL = "Partial"


class GradedQuestion(CamelModel):
    model_config = ConfigDict(frozen=True)

    question_number: str = Field(..., description="Question label as printed on the paper")
    question_text: str = Field("", description="The question as read from the question paper")
    student_answer: str = Field(..., description="Transcribed student answer")
    correct_answer: str = Field("", description="Answer from the key")
    marks_awarded: float = Field(..., ge=0, description="Marks given for this question")
    max_marks: Optional[float] = Field(None, ge=0, description="Maximum marks for this question")
    status: QuestionStatus = Field(..., description="Correct, Incorrect or Partial")
    feedback: str = Field("", description="Short reason for the grade")

    @model_validator(mode="after")
    def check_marks_within_maximum(self) -> "GradedQuestion":
        if self.max_marks is not None and self.marks_awarded > self.max_marks:
            raise ValueError(
                f"Question {self.question_number}: marksAwarded {self.marks_awarded} "
                f"exceeds maxMarks {self.max_marks}"
            )
        return self


class ExamResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    # Student details
    student_name: Optional[str] = Field(None, description="Student name, None when unknown")
    usn: Optional[str] = Field(None, description="University seat number")

    # Exam context
    class_name: Optional[str] = Field(None, description="e.g. CSE-A")
    semester: Optional[str] = Field(None, description="e.g. 5")
    subject_code: Optional[str] = Field(None, description="e.g. CS501")
    exam_name: Optional[str] = Field(None, description="e.g. Mid-Term 1")

    # Results
    timestamp: Optional[int] = Field(None, ge=0, le=MAX_TIMESTAMP_MS, description="Save time in epoch milliseconds")
    total_questions: int = Field(..., ge=0)
    total_max_marks: Optional[float] = Field(None, ge=0)
    total_marks_obtained: float = Field(..., ge=0)
    accuracy_percentage: float = Field(...)
    summary: str = Field("", description="Brief performance summary")
    questions: List[GradedQuestion] = Field(default_factory=list)

    def to_record(self) -> dict:
        """Serialize to the JSON object stored in the result list."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExamConfig(CamelModel):
    """The exam session a teacher is currently grading."""

    teacher_name: Optional[str] = None
    subject_code: str
    class_name: str
    semester: str
    exam_name: str
    total_students: Optional[int] = Field(None, ge=0)


class SessionProgress(CamelModel):
    graded: int
    total_students: Optional[int] = None
    remaining: Optional[int] = None


class StatusBreakdown(CamelModel):
    correct: int = 0
    incorrect: int = 0
    partial: int = 0
