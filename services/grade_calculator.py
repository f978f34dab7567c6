"""
services/grade_calculator.py

- 백분율 → (등급, 평어) 변환
- 학교가 정한 등급 구간 목록을 저장 순서대로 검사하여 처음 맞는 구간을 사용
- 구간 JSON 이 깨져 있거나 채점 기준 자체가 없으면 고정 9단계 등급표로 대체
"""

import logging
from typing import Any, List, Union

from pydantic import TypeAdapter, ValidationError

from schemas.grading import GradeRange, GradeResult, InvalidScale, ParsedScale, ValidScale

logger = logging.getLogger(__name__)

_RANGES = TypeAdapter(List[GradeRange])

# ✅ 고정 9단계 등급표 (하한, 등급, 평어) - 높은 순
DEFAULT_GRADE_LADDER = [
    (80, "1", "Excellent"),
    (70, "2", "Very Good"),
    (65, "3", "Good"),
    (60, "4", "High Average"),
    (55, "5", "Average"),
    (50, "6", "Low Average"),
    (45, "7", "Pass"),
    (40, "8", "Pass"),
]
DEFAULT_FAIL = ("9", "Fail")

# 학교 기본 채점 기준 생성 시 저장하는 구간 (고정 등급표와 동일한 경계)
DEFAULT_SCALE_RANGES = [
    {"grade": 1, "minPercent": 80, "maxPercent": 100, "remark": "Excellent"},
    {"grade": 2, "minPercent": 70, "maxPercent": 79, "remark": "Very Good"},
    {"grade": 3, "minPercent": 65, "maxPercent": 69, "remark": "Good"},
    {"grade": 4, "minPercent": 60, "maxPercent": 64, "remark": "High Average"},
    {"grade": 5, "minPercent": 55, "maxPercent": 59, "remark": "Average"},
    {"grade": 6, "minPercent": 50, "maxPercent": 54, "remark": "Low Average"},
    {"grade": 7, "minPercent": 45, "maxPercent": 49, "remark": "Pass"},
    {"grade": 8, "minPercent": 40, "maxPercent": 44, "remark": "Pass"},
    {"grade": 9, "minPercent": 0, "maxPercent": 39, "remark": "Fail"},
]


def default_grade(percentage: float) -> GradeResult:
    """고정 9단계 등급표 적용"""
    for threshold, grade, remark in DEFAULT_GRADE_LADDER:
        if percentage >= threshold:
            return GradeResult(grade=grade, remark=remark)
    grade, remark = DEFAULT_FAIL
    return GradeResult(grade=grade, remark=remark)


def parse_scale(raw: Union[str, bytes, list, None]) -> ParsedScale:
    """
    저장된 구간 데이터를 파싱
    - 정상: ValidScale(ranges)
    - JSON 오류 / 형식 불일치 / 빈 목록: InvalidScale(reason)
    """
    if raw is None:
        return InvalidScale(reason="no ranges stored")
    try:
        if isinstance(raw, (str, bytes)):
            ranges = _RANGES.validate_json(raw)
        else:
            ranges = _RANGES.validate_python(raw)
    except ValidationError as e:
        return InvalidScale(reason=f"{e.error_count()} validation error(s)")
    if not ranges:
        return InvalidScale(reason="empty range list")
    return ValidScale(ranges=ranges)


def grade_from_ranges(percentage: float, ranges: List[GradeRange]) -> GradeResult:
    # 저장 순서대로 처음 맞는 구간 (양 끝 포함)
    for r in ranges:
        if r.min_percent <= percentage <= r.max_percent:
            return GradeResult(grade=r.grade, remark=r.remark)
    # 맞는 구간이 없으면 목록의 "마지막" 구간 (최저 하한 구간이 아님)
    last = ranges[-1]
    return GradeResult(grade=last.grade, remark=last.remark)


def calculate_grade_from_scale(percentage: float, scale: Any) -> GradeResult:
    """
    percentage 를 채점 기준으로 변환. 어떤 경우에도 예외를 던지지 않는다.
    scale: GradingScale 모델(grades 속성) / 구간 JSON 문자열 / ParsedScale / None
    """
    if scale is None:
        return default_grade(percentage)

    if isinstance(scale, (ValidScale, InvalidScale)):
        parsed = scale
    else:
        parsed = parse_scale(getattr(scale, "grades", scale))

    if isinstance(parsed, InvalidScale):
        logger.warning(f"채점 기준 파싱 실패, 기본 등급표 사용: {parsed.reason}")
        return default_grade(percentage)
    return grade_from_ranges(percentage, parsed.ranges)
