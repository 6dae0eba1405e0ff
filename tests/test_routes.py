"""
Integration Tests for the HTTP routes

Each test builds an app around an in-memory store and a stub evaluator.
"""

import json

import pytest
from fastapi.testclient import TestClient

from exam_evaluator.exceptions import EvaluationError
from exam_evaluator.main import create_app

SESSION = {"subject_code": "CS501", "exam_name": "Midterm1", "class_name": "CSE-A", "semester": "5"}


class StubEvaluator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def evaluate(self, question_paper, answer_key, student_sheet, **kwargs):
        self.calls.append((question_paper, answer_key, student_sheet, kwargs))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def evaluator(result_factory):
    return StubEvaluator(result=result_factory())


@pytest.fixture
def client(store, evaluator):
    return TestClient(create_app(store=store, evaluator=evaluator))


class TestResultRoutes:

    def test_post_results_when_valid_then_created_with_timestamp(self, client, clock, result_factory):
        response = client.post("/results", json=result_factory().to_record())

        assert response.status_code == 201
        body = response.json()
        assert body["usn"] == "1RV19CS001"
        assert body["timestamp"] == clock.last

    def test_post_results_when_invalid_then_422(self, client):
        response = client.post("/results", json={"usn": "X1"})
        assert response.status_code == 422

    def test_get_results_when_saved_then_listed_in_camel_case(self, client, store, result_factory):
        store.save(result_factory())
        body = client.get("/results").json()
        assert body[0]["subjectCode"] == "CS501"

    def test_delete_results_when_called_then_store_empty(self, client, store, result_factory):
        store.save(result_factory())
        assert client.delete("/results").status_code == 204
        assert store.get_all() == []

    def test_get_session_when_other_semester_saved_then_excluded(self, client, store, result_factory):
        store.save(result_factory(usn="A"))
        store.save(result_factory(usn="B", semester="6"))

        body = client.get("/results/session", params=SESSION).json()
        assert [r["usn"] for r in body] == ["A"]

    def test_get_session_when_filter_missing_then_422(self, client):
        response = client.get("/results/session", params={"subject_code": "CS501"})
        assert response.status_code == 422

    def test_get_progress_when_class_size_given_then_remaining(self, client, store, result_factory):
        store.save(result_factory(usn="A"))
        body = client.get("/results/session/progress", params={**SESSION, "total_students": 30}).json()
        assert body == {"graded": 1, "totalStudents": 30, "remaining": 29}

    def test_get_history_when_student_matches_then_newest_first(self, client, store, result_factory):
        store.save(result_factory(examName="Mid1"))
        store.save(result_factory(examName="Mid2"))

        body = client.get("/results/history", params={"name": "jane", "usn": "1rv19cs001"}).json()
        assert [r["examName"] for r in body] == ["Mid2", "Mid1"]

    def test_get_history_when_no_match_then_empty_list(self, client):
        response = client.get("/results/history", params={"name": "x", "usn": "y"})
        assert response.status_code == 200
        assert response.json() == []

    def test_get_latest_when_no_match_then_404(self, client):
        response = client.get("/results/latest", params={"name": "x", "usn": "y"})
        assert response.status_code == 404
        assert response.json()["detail"] == "No result found"

    def test_get_latest_breakdown_when_found_then_counts(self, client, store, result_factory):
        store.save(result_factory())
        body = client.get("/results/latest/breakdown", params={"usn": "1RV19CS001"}).json()
        assert body == {"correct": 1, "incorrect": 0, "partial": 1}

    def test_get_report_when_session_given_then_csv_of_session(self, client, store, result_factory):
        store.save(result_factory(usn="A"))
        store.save(result_factory(usn="B", examName="Other"))

        response = client.get("/results/report", params=SESSION)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "Class_Exam_Report_" in response.headers["content-disposition"]
        lines = response.text.split("\n")
        assert lines[0].startswith("Date,Exam Name,")
        assert len(lines) == 2

    def test_get_report_when_no_filters_then_all_results(self, client, store, result_factory):
        store.save(result_factory(usn="A"))
        store.save(result_factory(usn="B", examName="Other"))
        assert len(client.get("/results/report").text.split("\n")) == 3

    def test_get_report_when_partial_filters_then_400(self, client):
        response = client.get("/results/report", params={"subject_code": "CS501"})
        assert response.status_code == 400

    def test_get_results_when_store_corrupt_then_generic_500(self, client, store, storage):
        storage.set_item(store.key, "{broken")
        response = client.get("/results")
        assert response.status_code == 500
        assert response.json()["detail"] == "Could not load results"
        assert storage.get_item(store.key) == "{broken"

    def test_get_report_when_stored_timestamp_out_of_range_then_generic_500(self, client, store, storage, result_factory):
        record = result_factory().to_record()
        record["timestamp"] = 10**20
        storage.set_item(store.key, json.dumps([record]))

        response = client.get("/results/report")
        assert response.status_code == 500
        assert response.json()["detail"] == "Could not load results"


class TestGradingRoutes:

    FORM = {
        "student_name": " Jane Doe ",
        "usn": "1RV19CS001",
        "subject_code": "CS501",
        "exam_name": "Midterm1",
        "class_name": "CSE-A",
        "semester": "5",
    }

    def files(self, sheet_name="sheet.jpg"):
        return {
            "question_paper": ("paper.pdf", b"%PDF-1.4 paper", "application/pdf"),
            "answer_key": ("key.png", b"\x89PNG key", "image/png"),
            "student_sheet": (sheet_name, b"\xff\xd8 sheet", "image/jpeg"),
        }

    def test_grade_when_valid_upload_then_result_returned_not_saved(self, client, store, evaluator):
        response = client.post("/grade", data=self.FORM, files=self.files())

        assert response.status_code == 200
        assert response.json()["usn"] == "1RV19CS001"
        assert store.get_all() == []

        paper, key, sheet, kwargs = evaluator.calls[0]
        assert paper.mime_type == "application/pdf"
        assert sheet.mime_type == "image/jpeg"
        assert kwargs["student_name"] == "Jane Doe"
        assert kwargs["session"].subject_code == "CS501"

    def test_grade_when_unsupported_file_then_400(self, client, evaluator):
        response = client.post("/grade", data=self.FORM, files=self.files("sheet.txt"))
        assert response.status_code == 400
        assert evaluator.calls == []

    def test_grade_when_evaluation_fails_then_502(self, store):
        failing = StubEvaluator(error=EvaluationError("Invalid JSON from grading model"))
        client = TestClient(create_app(store=store, evaluator=failing))

        response = client.post("/grade", data=self.FORM, files=self.files())
        assert response.status_code == 502
