"""
Analytics API Router

Thin HTTP surface over the analytics services. Requests carry the full
relevant history; nothing is fetched or stored here. This is the only layer
that reads the clock: a missing reference instant defaults to now.

Endpoints:
- POST /api/analytics/report - Student report for a window
- GET /api/analytics/window - Window bounds and label for a reference instant
- POST /api/analytics/risks - Risk evaluation plus the risk feedback payload
- POST /api/analytics/exam - Exam scoring plus the exam feedback payload
- POST /api/analytics/mistakes - Mistake distribution plus the feedback payload
- POST /api/analytics/cohort - Cross-student overview
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Query

from app.enums.analytics import WindowDirection, WindowKind
from app.middleware.error_handling import ErrorResponse, ValidationError
from app.models.analytics import (
    CohortOverview,
    CohortRequest,
    ExamAnalysisResponse,
    ExamRequest,
    MistakeAnalysisResponse,
    MistakeRequest,
    ReportRequest,
    RiskAnalysisResponse,
    RiskRequest,
    StudentReport,
    TimeWindow,
)
from app.services.analytics import (
    aggregate_mistakes,
    build_cohort_overview,
    build_exam_payload,
    build_mistake_payload,
    build_risk_payload,
    build_student_report,
    evaluate_risks,
    ingest_student,
    mistake_candidates,
    mistake_distribution,
    normalize_instant,
    reporting_now,
    score_exam,
    shift,
    window_for,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/analytics",
    tags=["analytics"],
    responses={500: {"model": ErrorResponse, "description": "Unexpected server error"}},
)


def resolve_reference(raw: Any) -> datetime:
    """
    Interpret the request's reference instant, defaulting to now.

    Raises:
        ValidationError: If a reference was given but cannot be interpreted.
    """
    if raw is None or raw == "":
        return reporting_now()

    reference = normalize_instant(raw)
    if reference is None:
        raise ValidationError(
            "Invalid reference instant",
            details={"reference": str(raw)},
        )
    return reference


# ===========================================
# Student Endpoints
# ===========================================


@router.post("/report", response_model=StudentReport)
async def get_student_report(request: ReportRequest) -> StudentReport:
    """
    Build the report for one student.

    Window-scoped values use the selected window (optionally paged with
    direction); progress, streak, risks and achievements use the full history.
    newlyUnlocked lists achievements not yet stored on the student.
    """
    reference = resolve_reference(request.reference)
    profile = ingest_student(request.student)
    return build_student_report(
        profile,
        reference,
        window=request.window,
        direction=request.direction,
    )


@router.get("/window", response_model=TimeWindow)
async def get_window(
    kind: WindowKind = Query(WindowKind.WEEK, description="Window granularity"),
    reference: Optional[str] = Query(None, description="Reference date/time (defaults to now)"),
    direction: Optional[WindowDirection] = Query(None, description="Page to prev/next window"),
) -> TimeWindow:
    """
    Get the bounds and display label of a reporting window.

    Used by the report pages to page through history without recomputing
    the full report.
    """
    instant = resolve_reference(reference)
    if direction is not None:
        instant = shift(kind, instant, direction)
    return window_for(kind, instant)


@router.post("/risks", response_model=RiskAnalysisResponse)
async def analyze_risks(request: RiskRequest) -> RiskAnalysisResponse:
    """
    Evaluate the risk rules for one student.

    Returns the detected risks and the payload for the risk feedback flow.
    """
    reference = resolve_reference(request.reference)
    profile = ingest_student(request.student)
    risks = evaluate_risks(profile.sessions, profile.weekly_goal, reference)
    logger.debug(f"{len(risks)} risks detected for {profile.name!r}")
    return RiskAnalysisResponse(risks=risks, payload=build_risk_payload(profile))


# ===========================================
# Exam Endpoints
# ===========================================


@router.post("/exam", response_model=ExamAnalysisResponse)
async def analyze_exam(request: ExamRequest) -> ExamAnalysisResponse:
    """
    Score an exam.

    Returns overall net and success rate, strengths and weaknesses, the topics
    offered for mistake categorization and the exam feedback payload.
    """
    score = score_exam(request.topic_results)
    return ExamAnalysisResponse(
        score=score,
        mistake_candidates=mistake_candidates(request.topic_results),
        payload=build_exam_payload(
            request.student_name, request.exam_name, request.subject_name, score
        ),
    )


@router.post("/mistakes", response_model=MistakeAnalysisResponse)
async def analyze_mistakes(request: MistakeRequest) -> MistakeAnalysisResponse:
    """
    Aggregate the mistake categories a student assigned after an exam.

    Uncategorized topics are ignored.
    """
    counts = aggregate_mistakes(request.entries)
    return MistakeAnalysisResponse(
        counts=counts,
        distribution=mistake_distribution(counts),
        payload=build_mistake_payload(request.student_name, counts),
    )


# ===========================================
# Cohort Endpoints
# ===========================================


@router.post("/cohort", response_model=CohortOverview)
async def get_cohort_overview(request: CohortRequest) -> CohortOverview:
    """
    Build cross-student statistics for the coach dashboard.
    """
    reference = resolve_reference(request.reference)
    students = [ingest_student(student) for student in request.students]
    return build_cohort_overview(students, reference)
