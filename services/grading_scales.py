"""
services/grading_scales.py

- 성적표 생성 시 적용할 채점 기준 조회 (학부 전용 기준 → 학교 기본 기준)
- 채점 기준 생성/수정/삭제 (학교당 기본 기준은 1개로 유지)
"""

import json
import logging
import random
from typing import List, Optional

from sqlalchemy.orm import Session

from models.grading_scales import GradingScale as GradingScaleModel
from schemas.grading import GradeRange, GradingScaleCreate, GradingScaleUpdate
from services.errors import InvalidRequest, NotFound
from services.grade_calculator import DEFAULT_SCALE_RANGES
from utils.timestamps import now_iso

logger = logging.getLogger(__name__)


def generate_grading_code() -> str:
    return "GRD" + "".join(random.choices("0123456789", k=6))


def _dump_ranges(grades: List[GradeRange]) -> str:
    if not grades:
        raise InvalidRequest("Grading scale must contain at least one grade range")
    return json.dumps([g.model_dump(by_alias=True) for g in grades])


# ==========================================================
# [조회] 성적표 생성용 채점 기준 선택
# ==========================================================
def resolve_grading_scale(
    db: Session, school_id: str, department: Optional[str] = None
) -> Optional[GradingScaleModel]:
    """
    1) department 가 있으면 해당 학부 전용 active 기준
    2) 없으면 학교 기본(is_default) active 기준
    3) 둘 다 없으면 None (호출 측에서 고정 등급표 사용)
    """
    if department:
        scale = (
            db.query(GradingScaleModel)
            .filter(
                GradingScaleModel.school_id == school_id,
                GradingScaleModel.department == department,
                GradingScaleModel.status == "active",
            )
            .order_by(GradingScaleModel.id)
            .first()
        )
        if scale is not None:
            return scale

    return (
        db.query(GradingScaleModel)
        .filter(
            GradingScaleModel.school_id == school_id,
            GradingScaleModel.is_default.is_(True),
            GradingScaleModel.status == "active",
        )
        .order_by(GradingScaleModel.id)
        .first()
    )


def list_grading_scales(db: Session, school_id: str) -> List[GradingScaleModel]:
    return (
        db.query(GradingScaleModel)
        .filter(GradingScaleModel.school_id == school_id)
        .order_by(GradingScaleModel.id)
        .all()
    )


def get_default_grading_scale(db: Session, school_id: str) -> Optional[GradingScaleModel]:
    return (
        db.query(GradingScaleModel)
        .filter(GradingScaleModel.school_id == school_id, GradingScaleModel.is_default.is_(True))
        .first()
    )


def get_grading_scale(db: Session, scale_id: int) -> GradingScaleModel:
    scale = db.get(GradingScaleModel, scale_id)
    if scale is None:
        raise NotFound("Grading scale", scale_id)
    return scale


# ==========================================================
# [변경] 생성/수정/삭제
# ==========================================================
def _clear_other_defaults(db: Session, school_id: str, keep_id: Optional[int] = None):
    others = (
        db.query(GradingScaleModel)
        .filter(GradingScaleModel.school_id == school_id, GradingScaleModel.is_default.is_(True))
        .all()
    )
    for scale in others:
        if scale.id != keep_id:
            scale.is_default = False


def create_default_grading_scale(db: Session, school_id: str, created_by: str) -> GradingScaleModel:
    """고정 9단계 등급표와 같은 구간으로 학교 기본 기준 생성"""
    now = now_iso()
    _clear_other_defaults(db, school_id)
    scale = GradingScaleModel(
        school_id=school_id,
        scale_code=generate_grading_code(),
        scale_name="Default Grading Scale",
        grades=json.dumps(DEFAULT_SCALE_RANGES),
        is_default=True,
        status="active",
        created_by=created_by,
        created_at=now,
        updated_at=now,
    )
    db.add(scale)
    db.commit()
    db.refresh(scale)
    logger.info(f"기본 채점 기준 생성: school={school_id}, scale_id={scale.id}")
    return scale


def create_grading_scale(db: Session, payload: GradingScaleCreate) -> GradingScaleModel:
    now = now_iso()
    grades = _dump_ranges(payload.grades)

    # 기본 기준으로 지정하면 기존 기본 기준 해제
    if payload.is_default:
        _clear_other_defaults(db, payload.school_id)

    scale = GradingScaleModel(
        school_id=payload.school_id,
        scale_code=generate_grading_code(),
        scale_name=payload.scale_name,
        department=payload.department,
        grades=grades,
        is_default=payload.is_default,
        status="active",
        created_by=payload.created_by,
        created_at=now,
        updated_at=now,
    )
    db.add(scale)
    db.commit()
    db.refresh(scale)
    logger.info(f"채점 기준 생성: school={payload.school_id}, scale_id={scale.id}, department={payload.department}")
    return scale


def update_grading_scale(db: Session, scale_id: int, payload: GradingScaleUpdate) -> GradingScaleModel:
    scale = get_grading_scale(db, scale_id)
    updates = payload.model_dump(exclude_unset=True)

    if "grades" in updates:
        scale.grades = _dump_ranges(payload.grades)
    if updates.get("scale_name") is not None:
        scale.scale_name = payload.scale_name
    if updates.get("status") is not None:
        scale.status = payload.status
    if updates.get("is_default") is not None:
        if payload.is_default:
            _clear_other_defaults(db, scale.school_id, keep_id=scale.id)
        scale.is_default = payload.is_default

    scale.updated_at = now_iso()
    db.commit()
    db.refresh(scale)
    return scale


def delete_grading_scale(db: Session, scale_id: int) -> None:
    scale = get_grading_scale(db, scale_id)
    db.delete(scale)
    db.commit()
    logger.info(f"채점 기준 삭제: scale_id={scale_id}")
