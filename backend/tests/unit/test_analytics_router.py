"""
Unit Tests for the Analytics API

Exercises the HTTP surface with FastAPI's TestClient:
- camelCase request and response bodies
- strict request validation (unknown fields, empty exams)
- reference instant handling and the structured error body
- health check
"""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app

REFERENCE = "2025-01-09T12:00:00Z"


@pytest.fixture
def client():
    """Test client for a fresh application instance."""
    return TestClient(create_app())


class TestHealth:
    """Tests for GET /api/health."""

    def test_health_check(self, client):
        """The service reports itself healthy with its timezone."""
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["timezone"] == "UTC"


class TestOpenApi:
    """Tests for the published API schema."""

    def test_error_body_is_documented(self, client):
        """Analytics routes document the structured error body."""
        schema = client.get("/openapi.json").json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/api/analytics/report"]["post"]["responses"]
        assert responses["500"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }


class TestReportEndpoint:
    """Tests for POST /api/analytics/report."""

    def test_report_for_current_week(self, client, raw_student):
        """Unusable sessions are dropped and the week is summarized."""
        response = client.post(
            "/api/analytics/report",
            json={"student": raw_student, "window": "week", "reference": REFERENCE},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["window"]["label"] == "06 Jan 2025 - 12 Jan 2025"
        assert body["totalSolved"] == 20
        assert body["totalCorrect"] == 15
        assert body["overallAccuracy"] == pytest.approx(75.0)
        assert body["streak"]["currentStreak"] == 1
        assert body["unlockedAchievements"] == ["first-step"]
        assert body["newlyUnlocked"] == []

    def test_previous_window(self, client, raw_student):
        """direction pages the window back."""
        response = client.post(
            "/api/analytics/report",
            json={
                "student": raw_student,
                "window": "week",
                "reference": REFERENCE,
                "direction": "prev",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["window"]["label"] == "30 Dec 2024 - 05 Jan 2025"
        assert body["totalSolved"] == 0

    def test_reference_defaults_to_now(self, client, raw_student):
        """Without a reference the current instant is used."""
        response = client.post("/api/analytics/report", json={"student": raw_student})
        assert response.status_code == 200

    def test_invalid_reference(self, client, raw_student):
        """An uninterpretable reference yields the structured 422 body."""
        response = client.post(
            "/api/analytics/report",
            json={"student": raw_student, "reference": "not a date"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"] == {"reference": "not a date"}
        assert body["error_id"]
        assert body["timestamp"]

    def test_null_weekly_goal(self, client, raw_student):
        """A null weekly goal is treated as no goal."""
        student = {**raw_student, "weeklyQuestionGoal": None}

        response = client.post(
            "/api/analytics/report",
            json={"student": student, "reference": REFERENCE},
        )

        assert response.status_code == 200
        assert response.json()["weeklyProgress"]["weeklyGoal"] == 0

    def test_unknown_field_is_rejected(self, client, raw_student):
        """Request bodies forbid unknown fields."""
        response = client.post(
            "/api/analytics/report",
            json={"student": raw_student, "windw": "month"},
        )
        assert response.status_code == 422

    def test_invalid_window_kind(self, client, raw_student):
        """Only the known window kinds are accepted."""
        response = client.post(
            "/api/analytics/report",
            json={"student": raw_student, "window": "fortnight"},
        )
        assert response.status_code == 422


class TestWindowEndpoint:
    """Tests for GET /api/analytics/window."""

    def test_month_window(self, client):
        """A month window for a date reference."""
        response = client.get(
            "/api/analytics/window", params={"kind": "month", "reference": "2025-01-09"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["label"] == "January 2025"
        assert body["start"].startswith("2025-01-01T00:00:00")

    def test_paging(self, client):
        """direction=prev returns the previous window."""
        response = client.get(
            "/api/analytics/window",
            params={"kind": "month", "reference": "2025-01-09", "direction": "prev"},
        )
        assert response.json()["label"] == "December 2024"

    def test_invalid_reference(self, client):
        """An invalid reference is a validation error."""
        response = client.get("/api/analytics/window", params={"reference": "soon"})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestRiskEndpoint:
    """Tests for POST /api/analytics/risks."""

    def test_risks_and_payload(self, client, raw_student):
        """20 of 100 on Thursday is a goal-miss warning."""
        response = client.post(
            "/api/analytics/risks",
            json={"student": raw_student, "reference": REFERENCE},
        )

        assert response.status_code == 200
        body = response.json()
        assert [(r["id"], r["severity"]) for r in body["risks"]] == [
            ("GOAL_MISS_RISK", "warning")
        ]
        assert body["payload"]["studentName"] == "Ada"
        assert body["payload"]["weeklyGoal"] == 100
        assert body["payload"]["studySessions"][0]["durationInMinutes"] == 45


class TestExamEndpoint:
    """Tests for POST /api/analytics/exam."""

    def test_score_exam(self, client):
        """The exam is scored and the feedback payload built."""
        response = client.post(
            "/api/analytics/exam",
            json={
                "studentName": "Ada",
                "examName": "Mock 3",
                "subjectName": "Mathematics",
                "topicResults": [
                    {"topic": "Derivatives", "correct": 8, "incorrect": 4, "empty": 0},
                    {"topic": "Limits", "correct": 10, "incorrect": 0, "empty": 0},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["score"]["overallNet"] == pytest.approx(17.0)
        assert body["score"]["strengths"] == ["Limits"]
        assert [t["topic"] for t in body["score"]["weaknesses"]] == ["Derivatives"]
        assert body["mistakeCandidates"] == ["Derivatives"]
        assert body["payload"]["examName"] == "Mock 3"

    def test_exam_requires_topics(self, client):
        """An exam without topic results is rejected."""
        response = client.post(
            "/api/analytics/exam",
            json={
                "studentName": "Ada",
                "examName": "Mock 3",
                "subjectName": "Mathematics",
                "topicResults": [],
            },
        )
        assert response.status_code == 422


class TestMistakeEndpoint:
    """Tests for POST /api/analytics/mistakes."""

    def test_mistake_distribution(self, client):
        """Categorized topics are counted; skipped ones are ignored."""
        response = client.post(
            "/api/analytics/mistakes",
            json={
                "studentName": "Ada",
                "entries": [
                    {"topic": "t1", "category": "knowledge_gap"},
                    {"topic": "t2", "category": "knowledge_gap"},
                    {"topic": "t3", "category": "time_pressure"},
                    {"topic": "t4"},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["counts"] == {"knowledge_gap": 2, "time_pressure": 1}
        assert body["distribution"][0] == {"category": "knowledge_gap", "count": 2}
        assert body["payload"]["errorAnalysisFormatted"] == (
            "- Knowledge Gap: 2 mistakes\n- Time Pressure: 1 mistakes"
        )

    def test_unknown_category_is_rejected(self, client):
        """Categories outside the known set fail validation."""
        response = client.post(
            "/api/analytics/mistakes",
            json={"studentName": "Ada", "entries": [{"topic": "t1", "category": "bad_luck"}]},
        )
        assert response.status_code == 422


class TestCohortEndpoint:
    """Tests for POST /api/analytics/cohort."""

    def test_cohort_overview(self, client, raw_student):
        """Students are ingested and summarized."""
        other = {**raw_student, "id": "student-2", "name": "Ben", "className": "11-B"}

        response = client.post(
            "/api/analytics/cohort",
            json={"students": [raw_student, other], "reference": REFERENCE},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["studentCount"] == 2
        assert sorted(g["key"] for g in body["classGroups"]) == ["11", "12"]
        assert len(body["activityByWeekday"]) == 7

    def test_empty_cohort(self, client):
        """No students give an empty overview."""
        response = client.post("/api/analytics/cohort", json={"students": []})

        assert response.status_code == 200
        assert response.json()["studentCount"] == 0
