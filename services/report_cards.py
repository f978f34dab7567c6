"""
services/report_cards.py

- 성적표 생성 워크플로 (학생 1명 / 학급 전체)
- 게시/게시 취소, 교사 입력 수정, 검토/승인, 삭제
- 조회 (학급별, 학교별, 상태별, 버전 이력)

모든 변경 작업은 호출자가 대상 학교 소속(관리자 → 교사 순으로 확인)인지 먼저 검사합니다.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.academic_years import AcademicYear as AcademicYearModel
from models.classes import Class as ClassModel
from models.exams import Exam as ExamModel
from models.report_cards import ReportCard as ReportCardModel
from models.report_cards import ReportCardVersion as ReportCardVersionModel
from models.school_admins import SchoolAdmin as SchoolAdminModel
from models.schools import School as SchoolModel
from models.student_marks import StudentMark as StudentMarkModel
from models.students import Student as StudentModel
from models.teachers import Teacher as TeacherModel
from models.terms import Term as TermModel
from schemas.report_cards import (
    BatchGenerateResult,
    BulkApproveRequest,
    ComputedFields,
    GenerateReportCardRequest,
    MarksSummary,
    PublishRequest,
    ReportKey,
    ReviewRequest,
    UnpublishRequest,
    UpdateReportCardRequest,
)
from services.class_rank import ClassRanking
from services.errors import (
    AggregateFailure,
    InvalidRequest,
    NoMarksFound,
    NotFound,
    ReportCardError,
    Unauthorized,
)
from services.grade_calculator import calculate_grade_from_scale, default_grade
from services.grading_scales import resolve_grading_scale
from services.marks_aggregator import aggregate_marks
from services.report_reconciler import reconcile_report_card
from utils.timestamps import now_iso

logger = logging.getLogger(__name__)


# ==========================================================
# [권한 확인]
# ==========================================================
def get_verified_school_id(db: Session, caller_id: str) -> str:
    """호출자 ID → 소속 학교 코드 (school_admins 먼저, 없으면 teachers)"""
    admin = db.get(SchoolAdminModel, caller_id)
    if admin is not None:
        return admin.school_id
    teacher = db.get(TeacherModel, caller_id)
    if teacher is not None:
        return teacher.school_id
    raise Unauthorized("Caller not found")


def authorize(db: Session, caller_id: str, school_id: str) -> None:
    if get_verified_school_id(db, caller_id) != school_id:
        logger.warning(f"권한 없음: caller={caller_id}, school={school_id}")
        raise Unauthorized()


# ==========================================================
# [조회 헬퍼]
# ==========================================================
def _find_student(db: Session, student_id: str) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.student_id == student_id).first()
    if student is None:
        raise NotFound("Student", student_id)
    return student


def _find_class(db: Session, class_code: str) -> ClassModel:
    class_doc = db.query(ClassModel).filter(ClassModel.class_code == class_code).first()
    if class_doc is None:
        raise NotFound("Class", class_code)
    return class_doc


def _student_marks(db: Session, exam_id: int, student_id: str) -> List[StudentMarkModel]:
    return (
        db.query(StudentMarkModel)
        .filter(StudentMarkModel.exam_id == exam_id, StudentMarkModel.student_id == student_id)
        .order_by(StudentMarkModel.id)
        .all()
    )


def _class_ranking(db: Session, exam_id: int, class_code: str) -> ClassRanking:
    marks = (
        db.query(StudentMarkModel)
        .filter(StudentMarkModel.exam_id == exam_id, StudentMarkModel.class_id == class_code)
        .order_by(StudentMarkModel.id)
        .all()
    )
    return ClassRanking.from_marks(marks)


def _active_students(db: Session, class_code: str) -> List[StudentModel]:
    # 졸업생 제외 (status 가 비어 있는 학생은 포함)
    return (
        db.query(StudentModel)
        .filter(
            StudentModel.class_id == class_code,
            or_(StudentModel.status != "graduated", StudentModel.status.is_(None)),
        )
        .order_by(StudentModel.id)
        .all()
    )


def _overall_grade(
    db: Session, percentage: float, school_id: str, department: Optional[str]
) -> Tuple[str, Optional[int], Optional[str]]:
    """(종합 등급, 채점 기준 ID, 채점 기준 이름) - 기준이 없으면 고정 등급표"""
    scale = resolve_grading_scale(db, school_id, department)
    if scale is None:
        return default_grade(percentage).grade, None, None
    result = calculate_grade_from_scale(percentage, scale)
    return result.grade, scale.id, scale.scale_name


def _computed_fields(
    db: Session,
    summary: MarksSummary,
    school_id: str,
    class_doc: ClassModel,
    position: int,
    total_students: int,
) -> ComputedFields:
    overall_grade, scale_id, scale_name = _overall_grade(
        db, summary.percentage, school_id, class_doc.department
    )
    return ComputedFields(
        subjects=summary.subjects,
        raw_score=summary.raw_score,
        total_score=summary.total_score,
        percentage=summary.percentage,
        overall_grade=overall_grade,
        position=position,
        total_students=total_students,
        grading_scale_id=scale_id,
        grading_scale_name=scale_name,
    )


def _load_reports(db: Session, report_ids: List[int], caller_id: str) -> List[ReportCardModel]:
    """대상 성적표를 모두 읽고 권한을 확인 (하나라도 실패하면 아무것도 바꾸지 않음)"""
    caller_school_id = get_verified_school_id(db, caller_id)
    reports = []
    for report_id in report_ids:
        report = db.get(ReportCardModel, report_id)
        if report is None:
            raise NotFound("Report card", report_id)
        if report.school_id != caller_school_id:
            raise Unauthorized()
        reports.append(report)
    return reports


# ==========================================================
# [생성] 학생 1명
# ==========================================================
def generate_report_card(db: Session, request: GenerateReportCardRequest) -> int:
    authorize(db, request.created_by, request.school_id)

    student = _find_student(db, request.student_id)
    class_doc = _find_class(db, request.class_id)

    marks = _student_marks(db, request.exam_id, request.student_id)
    if not marks:
        raise NoMarksFound("No marks found for student")
    summary = aggregate_marks(marks)

    # 반 석차는 호출마다 반 전체 성적으로 새로 계산
    ranking = _class_ranking(db, request.exam_id, request.class_id)
    total_students = len(_active_students(db, class_doc.class_code))

    computed = _computed_fields(
        db, summary, request.school_id, class_doc,
        position=ranking.position(request.student_id),
        total_students=total_students,
    )
    key = ReportKey(
        school_id=request.school_id,
        student_id=request.student_id,
        academic_year_id=request.academic_year_id,
        term_id=request.term_id,
    )
    identity = {
        "student_name": student.full_name,
        "class_id": request.class_id,
        "class_name": class_doc.class_name,
        "exam_id": request.exam_id,
        "term_name": request.term_name,
        "year": request.year,
        "house": request.house,
        "created_by": request.created_by,
    }

    try:
        report = reconcile_report_card(db, key, computed, narrative=request.narrative(), identity=identity)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return report.id


# ==========================================================
# [생성] 학급 전체 (학생별 실패는 모아서 반환)
# ==========================================================
def generate_report_cards(db: Session, exam_id: int, class_id: str, created_by: str) -> BatchGenerateResult:
    exam = db.get(ExamModel, exam_id)
    if exam is None:
        raise NotFound("Exam", exam_id)
    authorize(db, created_by, exam.school_id)

    class_doc = _find_class(db, class_id)

    # 성적표 표시용 이름 (학년도/학기/학교)
    academic_year_name = None
    if exam.academic_year_id:
        year = db.query(AcademicYearModel).filter(AcademicYearModel.year_code == exam.academic_year_id).first()
        academic_year_name = year.year_name if year else None
    term_name = None
    if exam.term_id:
        term = db.query(TermModel).filter(TermModel.term_code == exam.term_id).first()
        term_name = term.term_name if term else None
    school = db.query(SchoolModel).filter(SchoolModel.school_id == exam.school_id).first()
    display = {
        "academic_year_name": academic_year_name,
        "term_name": term_name,
        "school_name": school.name if school else None,
        "school_address": school.address if school else None,
        "school_phone": school.phone if school else None,
    }

    students = _active_students(db, class_doc.class_code)
    if not students:
        raise NotFound(
            "Students", class_id,
            message="No students found in the selected class (excluding graduated students)",
        )

    # 반 석차는 한 번만 계산해서 모든 학생에게 재사용
    ranking = _class_ranking(db, exam_id, class_doc.class_code)
    school_id, class_code, class_name = exam.school_id, class_doc.class_code, class_doc.class_name
    academic_year_id, term_id, exam_created_by = exam.academic_year_id, exam.term_id, exam.created_by
    roster = [(s.student_id, s.full_name) for s in students]

    logger.info(f"학급 성적표 일괄 생성 시작: exam={exam_id}, class={class_code}, students={len(roster)}")
    report_ids: List[int] = []
    errors: List[str] = []

    for student_id, student_name in roster:
        try:
            marks = _student_marks(db, exam_id, student_id)
            if not marks:
                raise NoMarksFound()
            summary = aggregate_marks(marks)
            computed = _computed_fields(
                db, summary, school_id, class_doc,
                position=ranking.position(student_id),
                total_students=len(roster),
            )
            key = ReportKey(
                school_id=school_id,
                student_id=student_id,
                academic_year_id=academic_year_id,
                term_id=term_id,
            )
            identity = {
                "student_name": student_name,
                "class_id": class_code,
                "class_name": class_name,
                "exam_id": exam_id,
                "created_by": exam_created_by,
            }
            report = reconcile_report_card(db, key, computed, display=display, identity=identity)
            db.commit()
            report_ids.append(report.id)
        except ReportCardError as e:
            db.rollback()
            logger.warning(f"성적표 생성 실패 - 학생: {student_name} ({e.message})")
            errors.append(f"{student_name}: {e.message}")
        except Exception as e:
            db.rollback()
            logger.exception(f"성적표 생성 중 예외 - 학생: {student_name}")
            errors.append(f"{student_name}: {str(e) or 'Unknown error'}")

    if not report_ids:
        raise AggregateFailure(errors)

    logger.info(f"학급 성적표 일괄 생성 완료: 성공 {len(report_ids)}건, 실패 {len(errors)}건")
    return BatchGenerateResult(
        success=True,
        count=len(report_ids),
        report_ids=report_ids,
        errors=errors or None,
    )


# ==========================================================
# [상태 변경] 게시 / 게시 취소
# ==========================================================
def publish_report_cards(db: Session, request: PublishRequest) -> int:
    reports = _load_reports(db, request.report_ids, request.published_by)
    now = now_iso()
    for report in reports:
        report.status = "published"
        report.published_at = now
        report.published_by = request.published_by
        report.published_by_role = request.published_by_role
        report.updated_at = now
    db.commit()
    logger.info(f"성적표 게시: {len(reports)}건, by={request.published_by}")
    return len(reports)


def unpublish_report_card(db: Session, report_id: int, request: UnpublishRequest) -> None:
    if not request.unpublish_reason or not request.unpublish_reason.strip():
        raise InvalidRequest("Unpublish reason is required")

    report = _load_reports(db, [report_id], request.unpublished_by)[0]
    now = now_iso()
    report.status = "draft"
    report.published_at = None
    report.published_by = None
    report.published_by_role = None
    report.unpublished_at = now
    report.unpublished_by = request.unpublished_by
    report.unpublish_reason = request.unpublish_reason
    report.updated_at = now
    db.commit()
    logger.info(f"성적표 게시 취소: report_id={report_id}, by={request.unpublished_by}")


# ==========================================================
# [수정] 교사 입력 항목 / 검토
# ==========================================================
def update_report_card(db: Session, report_id: int, request: UpdateReportCardRequest) -> int:
    report = _load_reports(db, [report_id], request.updated_by)[0]
    updates = request.model_dump(exclude_unset=True, exclude={"updated_by"})
    for field, value in updates.items():
        setattr(report, field, value)
    report.updated_at = now_iso()
    db.commit()
    return report.id


def review_report_card(db: Session, report_id: int, request: ReviewRequest) -> None:
    report = _load_reports(db, [report_id], request.reviewed_by)[0]
    now = now_iso()

    updates = request.model_dump(
        exclude_unset=True,
        exclude={"reviewed_by", "reviewed_by_name", "verify_and_approve", "review_notes"},
    )
    for field, value in updates.items():
        setattr(report, field, value)

    report.reviewed_by = request.reviewed_by
    report.reviewed_by_name = request.reviewed_by_name
    report.reviewed_at = now
    report.review_notes = request.review_notes
    report.updated_at = now
    if request.verify_and_approve:
        report.status = "generated"
        report.verified_by_class_teacher = True
    db.commit()


def bulk_approve_report_cards(db: Session, request: BulkApproveRequest) -> int:
    reports = _load_reports(db, request.report_ids, request.reviewed_by)
    now = now_iso()
    for report in reports:
        report.status = "generated"
        report.verified_by_class_teacher = True
        report.reviewed_by = request.reviewed_by
        report.reviewed_by_name = request.reviewed_by_name
        report.reviewed_at = now
        report.updated_at = now
    db.commit()
    return len(reports)


# ==========================================================
# [삭제]
# ==========================================================
def delete_report_card(db: Session, report_id: int, deleted_by: str) -> None:
    bulk_delete_report_cards(db, [report_id], deleted_by)


def bulk_delete_report_cards(db: Session, report_ids: List[int], deleted_by: str) -> int:
    reports = _load_reports(db, report_ids, deleted_by)
    for report in reports:
        db.delete(report)
    db.commit()
    logger.info(f"성적표 삭제: {len(reports)}건, by={deleted_by}")
    return len(reports)


# ==========================================================
# [조회] - 계산 없이 그대로 반환
# ==========================================================
def list_report_cards(
    db: Session,
    school_id: str,
    class_id: Optional[str] = None,
    term_id: Optional[str] = None,
    status: Optional[str] = None,
) -> List[ReportCardModel]:
    query = db.query(ReportCardModel).filter(ReportCardModel.school_id == school_id)
    if class_id:
        query = query.filter(ReportCardModel.class_id == class_id)
    if term_id:
        query = query.filter(ReportCardModel.term_id == term_id)
    if status:
        query = query.filter(ReportCardModel.status == status)
    return query.order_by(ReportCardModel.id).all()


def get_report_cards_by_school(db: Session, school_id: str) -> List[ReportCardModel]:
    # 최신순
    return (
        db.query(ReportCardModel)
        .filter(ReportCardModel.school_id == school_id)
        .order_by(ReportCardModel.id.desc())
        .all()
    )


def get_report_cards_by_status(
    db: Session,
    school_id: str,
    status: str,
    class_id: Optional[str] = None,
    term_id: Optional[str] = None,
) -> List[ReportCardModel]:
    reports = list_report_cards(db, school_id, class_id=class_id, term_id=term_id, status=status)
    return list(reversed(reports))


def get_draft_report_cards(
    db: Session, school_id: str, class_id: Optional[str] = None, term_id: Optional[str] = None
) -> List[ReportCardModel]:
    return get_report_cards_by_status(db, school_id, "draft", class_id=class_id, term_id=term_id)


def get_report_card(db: Session, report_id: int) -> ReportCardModel:
    report = db.get(ReportCardModel, report_id)
    if report is None:
        raise NotFound("Report card", report_id)
    return report


def list_report_card_versions(db: Session, report_id: int) -> List[ReportCardVersionModel]:
    get_report_card(db, report_id)
    return (
        db.query(ReportCardVersionModel)
        .filter(ReportCardVersionModel.report_id == report_id)
        .order_by(ReportCardVersionModel.version_number)
        .all()
    )
