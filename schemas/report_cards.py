from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

ReportStatus = Literal["draft", "generated", "published", "archived"]


# ==========================================================
# [계산 결과]
# ==========================================================
class SubjectSummary(BaseModel):
    subject_name: str
    class_score: Optional[float] = None
    exam_score: Optional[float] = None
    total_score: float
    max_marks: float
    percentage: Optional[float] = None
    position: int = 0                       # 과목 석차 없으면 0
    grade: Optional[int] = None             # 과목 등급 (student_marks.grade_number)
    remarks: Optional[str] = None


class MarksSummary(BaseModel):
    subjects: List[SubjectSummary]
    raw_score: float                        # 만점 합계
    total_score: float                      # 취득 점수 합계
    percentage: float


class ReportKey(BaseModel):
    """성적표 1건을 식별하는 키 (학교 x 학생 x 학년도 x 학기)"""
    school_id: str
    student_id: str
    academic_year_id: Optional[str] = None
    term_id: Optional[str] = None


class ComputedFields(BaseModel):
    subjects: List[SubjectSummary]
    raw_score: float
    total_score: float
    percentage: float
    overall_grade: str
    position: int
    total_students: int
    grading_scale_id: Optional[int] = None
    grading_scale_name: Optional[str] = None


# ==========================================================
# [입력용 스키마]
# ==========================================================
class NarrativeFields(BaseModel):
    """교사가 입력하는 서술형 항목 - 계산하지 않고 그대로 저장"""
    attendance: Optional[str] = None          # JSON: {"present": 64, "total": 68}
    conduct: Optional[str] = None
    attitude: Optional[str] = None
    interest: Optional[str] = None
    class_teacher_comment: Optional[str] = None
    headmaster_comment: Optional[str] = None
    class_teacher_sign: Optional[str] = None
    headmaster_sign: Optional[str] = None
    promoted_to: Optional[str] = None
    vacation_date: Optional[str] = None
    reopening_date: Optional[str] = None
    termly_performance: Optional[str] = None  # JSON: {"term1": 497, "term2": 562, "term3": null}


class GenerateReportCardRequest(NarrativeFields):
    school_id: str
    student_id: str                           # 학생 업무 ID
    class_id: str                             # 학급 코드 (classes.class_code)
    exam_id: int
    academic_year_id: Optional[str] = None
    term_id: Optional[str] = None
    term_name: Optional[str] = None
    year: Optional[str] = None
    house: Optional[str] = None
    created_by: str

    def narrative(self) -> NarrativeFields:
        return NarrativeFields(**self.model_dump(include=set(NarrativeFields.model_fields)))


class GenerateClassReportCardsRequest(BaseModel):
    exam_id: int
    class_id: str
    created_by: str


class PublishRequest(BaseModel):
    report_ids: List[int]
    published_by: str
    published_by_role: Literal["class_teacher", "admin"]


class UnpublishRequest(BaseModel):
    unpublished_by: str
    unpublish_reason: str


class UpdateReportCardRequest(BaseModel):
    updated_by: str
    attendance: Optional[str] = None
    conduct: Optional[str] = None
    attitude: Optional[str] = None
    interest: Optional[str] = None
    class_teacher_comment: Optional[str] = None
    headmaster_comment: Optional[str] = None
    class_teacher_sign: Optional[str] = None
    headmaster_sign: Optional[str] = None
    promoted_to: Optional[str] = None


class ReviewRequest(BaseModel):
    reviewed_by: str
    reviewed_by_name: str
    verify_and_approve: bool = False
    review_notes: Optional[str] = None
    attendance: Optional[str] = None
    conduct: Optional[str] = None
    attitude: Optional[str] = None
    interest: Optional[str] = None
    class_teacher_comment: Optional[str] = None
    headmaster_comment: Optional[str] = None


class BulkApproveRequest(BaseModel):
    report_ids: List[int]
    reviewed_by: str
    reviewed_by_name: str


class BulkDeleteRequest(BaseModel):
    report_card_ids: List[int]
    deleted_by: str


# ==========================================================
# [출력용 스키마]
# ==========================================================
class BatchGenerateResult(BaseModel):
    success: bool = True
    count: int
    report_ids: List[int] = Field(default_factory=list)
    errors: Optional[List[str]] = None


class ReportCard(BaseModel):
    """report_cards 행 전체 (저장된 값 그대로)"""
    id: int

    # 식별 정보
    school_id: str
    report_code: str
    student_id: str
    student_name: Optional[str] = None
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    exam_id: Optional[int] = None
    academic_year_id: Optional[str] = None
    term_id: Optional[str] = None

    # 표시용 중복 저장 정보
    academic_year_name: Optional[str] = None
    term_name: Optional[str] = None
    year: Optional[str] = None
    house: Optional[str] = None
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    school_phone: Optional[str] = None

    # 계산 결과
    subjects: str
    raw_score: Optional[float] = None
    total_score: Optional[float] = None
    percentage: Optional[float] = None
    overall_grade: Optional[str] = None
    position: Optional[int] = None
    total_students: Optional[int] = None
    grading_scale_id: Optional[int] = None
    grading_scale_name: Optional[str] = None

    # 교사 입력 항목
    attendance: Optional[str] = None
    conduct: Optional[str] = None
    attitude: Optional[str] = None
    interest: Optional[str] = None
    class_teacher_comment: Optional[str] = None
    headmaster_comment: Optional[str] = None
    class_teacher_sign: Optional[str] = None
    headmaster_sign: Optional[str] = None
    promotion_status: Optional[str] = None
    promoted_to: Optional[str] = None
    vacation_date: Optional[str] = None
    reopening_date: Optional[str] = None
    termly_performance: Optional[str] = None

    # 상태/버전 관리
    status: str
    version: int
    previous_version_id: Optional[int] = None
    generated_at: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    published_at: Optional[str] = None
    published_by: Optional[str] = None
    published_by_role: Optional[str] = None
    unpublished_at: Optional[str] = None
    unpublished_by: Optional[str] = None
    unpublish_reason: Optional[str] = None

    reviewed_by: Optional[str] = None
    reviewed_by_name: Optional[str] = None
    reviewed_at: Optional[str] = None
    review_notes: Optional[str] = None
    verified_by_class_teacher: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)


class ReportCardVersion(BaseModel):
    id: int
    report_id: int
    version_number: int
    snapshot: str
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
