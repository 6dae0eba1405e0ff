from string import Template

evaluation_prompt_template = Template(
    """Act as a strict and accurate university exam evaluator.
You are provided with three documents:
1. The Question Paper (contains questions and max marks).
2. The Answer Key (contains correct answers).
3. The Student's Answer Sheet (handwritten).

Your task:
1. Identify each question from the Question Paper.
2. Transcribe the student's handwritten answer for that question from the Answer Sheet.
3. Compare the student's answer against the Answer Key.
4. Assign marks based on correctness. If max marks aren't explicitly clear, assume ${default_marks} mark per question.
5. Never award more marks for a question than its max marks.
6. Calculate the total score and accuracy.
7. Return the result strictly in JSON format.
"""
)

# Output contract of the grading model, in the SDK's schema dialect.
EVALUATION_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "studentName": {"type": "STRING", "description": "Name of student if visible, else 'Unknown'"},
        "totalQuestions": {"type": "NUMBER"},
        "totalMaxMarks": {"type": "NUMBER"},
        "totalMarksObtained": {"type": "NUMBER"},
        "accuracyPercentage": {"type": "NUMBER"},
        "summary": {"type": "STRING", "description": "Brief performance summary."},
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "questionNumber": {"type": "STRING"},
                    "questionText": {"type": "STRING"},
                    "studentAnswer": {"type": "STRING", "description": "Transcribed student answer"},
                    "correctAnswer": {"type": "STRING", "description": "Answer from key"},
                    "marksAwarded": {"type": "NUMBER"},
                    "maxMarks": {"type": "NUMBER"},
                    "status": {"type": "STRING", "enum": ["Correct", "Incorrect", "Partial"]},
                    "feedback": {"type": "STRING", "description": "Short reason for the grade"},
                },
                "required": ["questionNumber", "studentAnswer", "marksAwarded", "status"],
            },
        },
    },
    "required": ["totalQuestions", "totalMarksObtained", "questions", "accuracyPercentage"],
}


def build_evaluation_prompt(default_marks: int = 1) -> str:
    return evaluation_prompt_template.substitute(default_marks=default_marks)
