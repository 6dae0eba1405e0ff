"""
Grades one answer sheet with Gemini.

The model receives the question paper, the answer key and the student's
sheet as inline documents together with a fixed prompt, and answers with JSON
matching EVALUATION_RESPONSE_SCHEMA. The result is validated into an
ExamResult but never saved here; saving is the caller's decision.
"""
import json
import logging
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from exam_evaluator.config import API_KEY, EVALUATION_TEMPERATURE, MODEL_NAME
from exam_evaluator.exceptions import EvaluationError
from exam_evaluator.prompts.prompt import EVALUATION_RESPONSE_SCHEMA, build_evaluation_prompt
from exam_evaluator.schemas import ExamConfig, ExamResult
from exam_evaluator.utils.file_utils import UploadedDocument

logger = logging.getLogger(__name__)


class ExamEvaluator:
    def __init__(self, client: Optional[genai.Client] = None,
                 model_name: str = MODEL_NAME,
                 temperature: float = EVALUATION_TEMPERATURE):
        self._client = client
        self.model_name = model_name
        self.temperature = temperature

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=API_KEY)
        return self._client

    async def evaluate(self, question_paper: UploadedDocument, answer_key: UploadedDocument,
                       student_sheet: UploadedDocument,
                       student_name: Optional[str] = None,
                       usn: Optional[str] = None,
                       session: Optional[ExamConfig] = None) -> ExamResult:
        """
        Grade a student sheet and attach the teacher-entered details.

        Raises EvaluationError when the model call fails or its answer does
        not match the ExamResult schema.
        """
        parts = [
            types.Part.from_text(text=build_evaluation_prompt()),
            types.Part.from_bytes(data=question_paper.data, mime_type=question_paper.mime_type),
            types.Part.from_bytes(data=answer_key.data, mime_type=answer_key.mime_type),
            types.Part.from_bytes(data=student_sheet.data, mime_type=student_sheet.mime_type),
        ]

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=types.Content(role="user", parts=parts),
                config={
                    "response_mime_type": "application/json",
                    "response_schema": EVALUATION_RESPONSE_SCHEMA,
                    "temperature": self.temperature,
                },
            )
        except Exception as e:
            logger.error(f"Gemini API call failed: {str(e)}")
            raise EvaluationError(f"Error calling grading model: {e}") from e

        result = parse_evaluation(response.text)

        details = {}
        if student_name is not None:
            details["student_name"] = student_name
        if usn is not None:
            details["usn"] = usn
        if session is not None:
            details.update(session.model_dump(
                include={"teacher_name", "subject_code", "class_name", "semester", "exam_name"},
                exclude_none=True,
            ))

        # Re-validate so the merged fields go through the same checks.
        merged = {**result.model_dump(), **details}
        return ExamResult.model_validate(merged)


def parse_evaluation(text: Optional[str]) -> ExamResult:
    """Decode the model's JSON answer into an ExamResult."""
    if not text:
        raise EvaluationError("No response text received from grading model")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON from grading model: {text[:200]}")
        raise EvaluationError(f"Invalid JSON from grading model: {e}") from e

    try:
        return ExamResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"Grading model output failed validation: {str(e)}")
        raise EvaluationError(f"Grading model output does not match the result schema: {e}") from e
