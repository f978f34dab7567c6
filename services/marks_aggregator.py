import math
from typing import Iterable, Optional

from config.settings import settings
from schemas.report_cards import MarksSummary, SubjectSummary
from services.errors import NoMarksFound, ZeroMaxScore


def overall_percentage(total_score: float, raw_score: float, policy: Optional[str] = None) -> float:
    """
    total_score / raw_score * 100
    raw_score == 0 일 때는 정책에 따름 (propagate: NaN/inf, zero: 0.0, raise: ZeroMaxScore)
    """
    policy = policy or settings.ZERO_MAX_SCORE_POLICY
    if raw_score != 0:
        return total_score / raw_score * 100
    if policy == "raise":
        raise ZeroMaxScore()
    if policy == "zero":
        return 0.0
    # propagate: 0/0 → NaN, x/0 → ±inf
    if total_score == 0:
        return math.nan
    return math.copysign(math.inf, total_score)


def aggregate_marks(marks: Iterable, zero_max_policy: Optional[str] = None) -> MarksSummary:
    """한 학생의 한 시험 과목 성적들을 합산"""
    subjects = []
    total_score = 0.0
    raw_score = 0.0

    for mark in marks:
        total_score += mark.total_score
        raw_score += mark.max_marks
        subjects.append(SubjectSummary(
            subject_name=mark.subject_name,
            class_score=mark.class_score,
            exam_score=mark.exam_score,
            total_score=mark.total_score,
            max_marks=mark.max_marks,
            percentage=mark.percentage,
            position=mark.position or 0,
            grade=mark.grade_number,
            remarks=mark.remarks,
        ))

    if not subjects:
        raise NoMarksFound()

    return MarksSummary(
        subjects=subjects,
        raw_score=raw_score,
        total_score=total_score,
        percentage=overall_percentage(total_score, raw_score, zero_max_policy),
    )
