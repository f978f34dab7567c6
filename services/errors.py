"""
services/errors.py

- 성적표 서비스 계층에서 던지는 도메인 예외 모음
- 라우터는 예외를 직접 처리하지 않고, middlewares/error_handler.py 에서 HTTP 응답으로 변환
"""

from typing import List, Optional


class ReportCardError(Exception):
    """서비스 예외 공통 부모 (code / status_code 를 가진다)"""
    code = "REPORT_CARD_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(ReportCardError):
    code = "UNAUTHORIZED"
    status_code = 403

    def __init__(self, reason: str = "You do not belong to this school"):
        super().__init__(f"Unauthorized: {reason}")


class NotFound(ReportCardError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, key: Optional[object] = None, message: Optional[str] = None):
        super().__init__(message or f"{entity} not found")
        self.entity = entity
        self.key = key


class NoMarksFound(ReportCardError):
    code = "NO_MARKS_FOUND"
    status_code = 404

    def __init__(self, message: str = "No marks found"):
        super().__init__(message)


class ZeroMaxScore(ReportCardError):
    code = "ZERO_MAX_SCORE"
    status_code = 422

    def __init__(self, message: str = "Total max marks is 0, percentage is undefined"):
        super().__init__(message)


class InvalidRequest(ReportCardError):
    code = "INVALID_REQUEST"
    status_code = 400


class AggregateFailure(ReportCardError):
    code = "AGGREGATE_FAILURE"
    status_code = 422

    def __init__(self, errors: List[str]):
        super().__init__(f"Failed to generate any report cards. Errors: {'; '.join(errors)}")
        self.errors = list(errors)
