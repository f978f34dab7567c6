from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from schemas.grading import (
    DefaultScaleRequest,
    GradingScale as GradingScaleSchema,
    GradingScaleCreate,
    GradingScaleUpdate,
)
from services import grading_scales as grading_scale_service

router = APIRouter(prefix="/grading-scales", tags=["채점 기준"])

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _serialize(scale) -> dict:
    return GradingScaleSchema.model_validate(scale).model_dump()


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 채점 기준 추가
@router.post("/")
def create_grading_scale(payload: GradingScaleCreate, db: Session = Depends(get_db)):
    scale = grading_scale_service.create_grading_scale(db, payload)
    return {
        "success": True,
        "data": _serialize(scale),
        "message": "채점 기준이 추가되었습니다"
    }


# ✅ [CREATE] 학교 기본 채점 기준(9단계) 생성
@router.post("/default")
def create_default_grading_scale(payload: DefaultScaleRequest, db: Session = Depends(get_db)):
    scale = grading_scale_service.create_default_grading_scale(db, payload.school_id, payload.created_by)
    return {
        "success": True,
        "data": _serialize(scale),
        "message": "기본 채점 기준이 생성되었습니다"
    }


# ✅ [READ] 학교별 채점 기준 목록
@router.get("/")
def read_grading_scales(school_id: str, db: Session = Depends(get_db)):
    records = grading_scale_service.list_grading_scales(db, school_id)
    return {
        "success": True,
        "data": [_serialize(r) for r in records],
        "message": "채점 기준 목록 조회 완료"
    }


# ✅ [READ] 학교 기본 채점 기준
@router.get("/default")
def read_default_grading_scale(school_id: str, db: Session = Depends(get_db)):
    scale = grading_scale_service.get_default_grading_scale(db, school_id)
    if scale is None:
        return {
            "success": False,
            "error": {"code": 404, "message": "기본 채점 기준이 없습니다"}
        }
    return {
        "success": True,
        "data": _serialize(scale),
        "message": "기본 채점 기준 조회 성공"
    }


# ==========================================================
# [2단계] 완전 동적 라우터 (개별 조회/수정/삭제)
# ==========================================================

# ✅ [READ] 특정 채점 기준 조회
@router.get("/{scale_id}")
def read_grading_scale(scale_id: int, db: Session = Depends(get_db)):
    scale = grading_scale_service.get_grading_scale(db, scale_id)
    return {
        "success": True,
        "data": _serialize(scale),
        "message": "채점 기준 조회 성공"
    }


# ✅ [UPDATE] 채점 기준 수정
@router.put("/{scale_id}")
def update_grading_scale(scale_id: int, payload: GradingScaleUpdate, db: Session = Depends(get_db)):
    scale = grading_scale_service.update_grading_scale(db, scale_id, payload)
    return {
        "success": True,
        "data": _serialize(scale),
        "message": "채점 기준이 수정되었습니다"
    }


# ✅ [DELETE] 채점 기준 삭제
@router.delete("/{scale_id}")
def delete_grading_scale(scale_id: int, db: Session = Depends(get_db)):
    grading_scale_service.delete_grading_scale(db, scale_id)
    return {
        "success": True,
        "data": {"scale_id": scale_id},
        "message": "채점 기준이 삭제되었습니다"
    }
