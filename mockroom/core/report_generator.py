"""
Report Generator for MockRoom

Builds the results view for a completed interview:
- Overall score with letter grade
- Graded dimension scores
- Strengths and improvement areas
- Session statistics
"""

import logging

from mockroom.exceptions import ReportNotReady
from mockroom.models.interview import InterviewSession
from mockroom.models.report import DimensionScore, ResultsReport, ScoreBand

logger = logging.getLogger(__name__)

# (minimum score, grade), highest first
GRADE_THRESHOLDS: list[tuple[int, str]] = [
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
]


def score_grade(score: int) -> str:
    """Letter grade for a 0-100 score."""
    for minimum, grade in GRADE_THRESHOLDS:
        if score >= minimum:
            return grade
    return "C"


def score_band(score: int) -> ScoreBand:
    """Colour band for a 0-100 score."""
    if score >= 80:
        return ScoreBand.EXCELLENT
    elif score >= 70:
        return ScoreBand.GOOD
    elif score >= 60:
        return ScoreBand.FAIR
    else:
        return ScoreBand.POOR


def build_results_report(session: InterviewSession) -> ResultsReport:
    """
    Build the results view for a session.
    
    Raises:
        ReportNotReady: If the session has not been completed
    """
    evaluation = session.evaluation
    if not session.is_completed or evaluation is None or session.end_time is None:
        raise ReportNotReady(f"Session {session.id} has no results yet")
    
    dimensions = [
        DimensionScore(
            label=label,
            score=score,
            grade=score_grade(score),
            band=score_band(score),
        )
        for label, score in evaluation.dimension_scores().items()
    ]
    
    minutes = int(session.duration_seconds() // 60)
    
    logger.debug(f"Built results report for session {session.id}")
    
    return ResultsReport(
        session_id=session.id,
        user_id=session.user_id,
        job_post_id=session.job_post_id,
        overall_score=evaluation.overall,
        overall_grade=score_grade(evaluation.overall),
        overall_band=score_band(evaluation.overall),
        dimension_scores=dimensions,
        feedback=evaluation.feedback,
        strengths=list(evaluation.strengths),
        improvements=list(evaluation.improvements),
        question_scores=dict(evaluation.question_scores),
        questions_total=len(session.questions),
        questions_answered=len(session.responses),
        interview_duration_minutes=minutes,
        started_at=session.start_time,
        completed_at=session.end_time,
    )
