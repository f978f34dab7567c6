"""
services/report_reconciler.py

- 성적표 "생성 또는 갱신" 처리 (학교 x 학생 x 학년도 x 학기 당 1건)
- 이미 있으면 같은 행을 덮어쓰고 version +1, previous_version_id = 자기 자신 ID
- 없으면 새 행 생성 (status=draft, version=1)
- commit 은 호출 측(오케스트레이터)이 담당
"""

import json
import logging
import random
from typing import Optional

from sqlalchemy.orm import Session

from config.settings import settings
from models.report_cards import ReportCard as ReportCardModel
from models.report_cards import ReportCardVersion as ReportCardVersionModel
from schemas.report_cards import ComputedFields, NarrativeFields, ReportKey
from utils.timestamps import now_iso

logger = logging.getLogger(__name__)

# 스냅샷에 남기는 필드 (계산 결과 + 교사 입력 + 표시용 정보)
SNAPSHOT_FIELDS = (
    "subjects", "raw_score", "total_score", "percentage", "overall_grade",
    "position", "total_students", "grading_scale_id", "grading_scale_name",
    "exam_id", "class_id", "class_name", "academic_year_name", "term_name",
    "school_name", "school_address", "school_phone",
    *NarrativeFields.model_fields,
    "status", "version", "generated_at",
)


def generate_report_code() -> str:
    return "RPT" + "".join(random.choices("0123456789", k=8))


def _unique_report_code(db: Session) -> str:
    for _ in range(max(1, settings.REPORT_CODE_MAX_ATTEMPTS)):
        code = generate_report_code()
        taken = db.query(ReportCardModel.id).filter(ReportCardModel.report_code == code).first()
        if taken is None:
            return code
        logger.warning(f"reportCode 충돌, 재생성: {code}")
    # 재시도 한도 초과 시 마지막 코드 사용 (unique 제약에서 걸러짐)
    return code


def find_report_card(db: Session, key: ReportKey) -> Optional[ReportCardModel]:
    """
    (school_id, student_id) 로 조회 후 (academic_year_id, term_id) 를 메모리에서 비교
    None 은 None 과만 일치 (와일드카드 아님)
    """
    candidates = (
        db.query(ReportCardModel)
        .filter(
            ReportCardModel.school_id == key.school_id,
            ReportCardModel.student_id == key.student_id,
        )
        .order_by(ReportCardModel.id)
        .all()
    )
    for report in candidates:
        if report.academic_year_id == key.academic_year_id and report.term_id == key.term_id:
            return report
    return None


def _computed_values(computed: ComputedFields) -> dict:
    values = computed.model_dump(exclude={"subjects"})
    values["subjects"] = json.dumps([s.model_dump() for s in computed.subjects])
    return values


def snapshot_report_card(db: Session, report: ReportCardModel, now: str) -> ReportCardVersionModel:
    """갱신 직전 값을 report_card_versions 에 추가 (append-only)"""
    snapshot = {field: getattr(report, field) for field in SNAPSHOT_FIELDS}
    version = ReportCardVersionModel(
        report_id=report.id,
        version_number=report.version or 1,
        snapshot=json.dumps(snapshot),
        created_at=now,
    )
    db.add(version)
    return version


def reconcile_report_card(
    db: Session,
    key: ReportKey,
    computed: ComputedFields,
    narrative: Optional[NarrativeFields] = None,
    display: Optional[dict] = None,
    identity: Optional[dict] = None,
    keep_history: Optional[bool] = None,
) -> ReportCardModel:
    """
    - narrative: 주어지면 모든 서술 항목을 덮어씀 (None 값 포함)
    - display: 생성/갱신 모두에 기록하는 표시용 정보 (학년도명, 학기명, 학교 정보 등)
    - identity: 생성 시에만 기록하는 정보 (학생명, 학급명, 시험 ID, 작성자 등)
    """
    if keep_history is None:
        keep_history = settings.REPORT_VERSION_HISTORY
    now = now_iso()
    values = _computed_values(computed)
    if narrative is not None:
        values.update(narrative.model_dump())
    values.update(display or {})

    existing = find_report_card(db, key)
    if existing is not None:
        if keep_history:
            snapshot_report_card(db, existing, now)

        for field, value in values.items():
            setattr(existing, field, value)
        existing.version = (existing.version or 1) + 1
        existing.previous_version_id = existing.id
        existing.generated_at = now
        existing.updated_at = now
        db.flush()
        logger.info(
            f"성적표 갱신: report_id={existing.id}, student={key.student_id}, version={existing.version}"
        )
        return existing

    fields = {**(identity or {}), **values}
    fields.update(
        school_id=key.school_id,
        student_id=key.student_id,
        academic_year_id=key.academic_year_id,
        term_id=key.term_id,
        report_code=_unique_report_code(db),
        promotion_status=None,
        status="draft",
        version=1,
        generated_at=now,
        created_at=now,
        updated_at=now,
    )
    report = ReportCardModel(**fields)
    db.add(report)
    db.flush()
    logger.info(f"성적표 생성: report_id={report.id}, code={report.report_code}, student={key.student_id}")
    return report
