from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import SessionLocal
from schemas.report_cards import (
    BulkApproveRequest,
    BulkDeleteRequest,
    GenerateClassReportCardsRequest,
    GenerateReportCardRequest,
    PublishRequest,
    ReportCard as ReportCardSchema,
    ReportCardVersion as ReportCardVersionSchema,
    ReportStatus,
    ReviewRequest,
    UnpublishRequest,
    UpdateReportCardRequest,
)
from services import report_cards as report_card_service

router = APIRouter(prefix="/report-cards", tags=["성적표"])

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _serialize(report) -> dict:
    # mode="json": NaN/inf 백분율은 null 로 내려감
    return ReportCardSchema.model_validate(report).model_dump(mode="json")


# ==========================================================
# [1단계] 생성 라우터
# ==========================================================

# ✅ [GENERATE] 학생 1명 성적표 생성/갱신
@router.post("/generate")
def generate_report_card(payload: GenerateReportCardRequest, db: Session = Depends(get_db)):
    report_id = report_card_service.generate_report_card(db, payload)
    return {
        "success": True,
        "data": {"report_id": report_id},
        "message": "성적표가 생성되었습니다"
    }


# ✅ [GENERATE] 학급 전체 성적표 일괄 생성 (일부 실패 허용)
@router.post("/generate-class")
def generate_class_report_cards(payload: GenerateClassReportCardsRequest, db: Session = Depends(get_db)):
    result = report_card_service.generate_report_cards(db, payload.exam_id, payload.class_id, payload.created_by)
    return {
        "success": True,
        "data": result.model_dump(),
        "message": f"성적표 {result.count}건이 생성되었습니다"
    }


# ==========================================================
# [2단계] 상태 변경 / 검토 라우터
# ==========================================================

# ✅ [PUBLISH] 성적표 게시
@router.post("/publish")
def publish_report_cards(payload: PublishRequest, db: Session = Depends(get_db)):
    count = report_card_service.publish_report_cards(db, payload)
    return {
        "success": True,
        "data": {"count": count},
        "message": "성적표가 게시되었습니다"
    }


# ✅ [APPROVE] 성적표 일괄 승인
@router.post("/approve")
def bulk_approve_report_cards(payload: BulkApproveRequest, db: Session = Depends(get_db)):
    count = report_card_service.bulk_approve_report_cards(db, payload)
    return {
        "success": True,
        "data": {"count": count},
        "message": "성적표가 승인되었습니다"
    }


# ✅ [DELETE] 성적표 일괄 삭제
@router.post("/bulk-delete")
def bulk_delete_report_cards(payload: BulkDeleteRequest, db: Session = Depends(get_db)):
    count = report_card_service.bulk_delete_report_cards(db, payload.report_card_ids, payload.deleted_by)
    return {
        "success": True,
        "data": {"count": count},
        "message": "성적표가 삭제되었습니다"
    }


# ==========================================================
# [3단계] 조회 라우터
# ==========================================================

# ✅ [READ] 학교/학급/학기/상태별 성적표 목록
@router.get("/")
def read_report_cards(
    school_id: str,
    class_id: Optional[str] = None,
    term_id: Optional[str] = None,
    status: Optional[ReportStatus] = None,
    db: Session = Depends(get_db),
):
    if status:
        records = report_card_service.get_report_cards_by_status(db, school_id, status, class_id, term_id)
    else:
        records = report_card_service.list_report_cards(db, school_id, class_id, term_id)
    return {
        "success": True,
        "data": [_serialize(r) for r in records],
        "message": "성적표 목록 조회 완료"
    }


# ✅ [READ] 학교 전체 성적표 (최신순)
@router.get("/school/{school_id}")
def read_report_cards_by_school(school_id: str, db: Session = Depends(get_db)):
    records = report_card_service.get_report_cards_by_school(db, school_id)
    return {
        "success": True,
        "data": [_serialize(r) for r in records],
        "message": "학교별 성적표 조회 완료"
    }


# ==========================================================
# [4단계] 완전 동적 라우터 (개별 조회/수정/삭제)
# ==========================================================

# ✅ [READ] 특정 성적표 조회
@router.get("/{report_id}")
def read_report_card(report_id: int, db: Session = Depends(get_db)):
    report = report_card_service.get_report_card(db, report_id)
    return {
        "success": True,
        "data": _serialize(report),
        "message": "성적표 상세 조회 성공"
    }


# ✅ [READ] 특정 성적표 버전 스냅샷 목록
@router.get("/{report_id}/versions")
def read_report_card_versions(report_id: int, db: Session = Depends(get_db)):
    versions = report_card_service.list_report_card_versions(db, report_id)
    return {
        "success": True,
        "data": [ReportCardVersionSchema.model_validate(v).model_dump() for v in versions],
        "message": "성적표 버전 이력 조회 성공"
    }


# ✅ [UNPUBLISH] 성적표 게시 취소 (사유 필수)
@router.post("/{report_id}/unpublish")
def unpublish_report_card(report_id: int, payload: UnpublishRequest, db: Session = Depends(get_db)):
    report_card_service.unpublish_report_card(db, report_id, payload)
    return {
        "success": True,
        "data": {"report_id": report_id},
        "message": "성적표 게시가 취소되었습니다"
    }


# ✅ [REVIEW] 성적표 검토 (승인 포함 가능)
@router.post("/{report_id}/review")
def review_report_card(report_id: int, payload: ReviewRequest, db: Session = Depends(get_db)):
    report_card_service.review_report_card(db, report_id, payload)
    return {
        "success": True,
        "data": {"report_id": report_id},
        "message": "성적표 검토가 저장되었습니다"
    }


# ✅ [UPDATE] 교사 입력 항목 수정
@router.put("/{report_id}")
def update_report_card(report_id: int, payload: UpdateReportCardRequest, db: Session = Depends(get_db)):
    report_card_service.update_report_card(db, report_id, payload)
    return {
        "success": True,
        "data": {"report_id": report_id},
        "message": "성적표가 수정되었습니다"
    }


# ✅ [DELETE] 특정 성적표 삭제
@router.delete("/{report_id}")
def delete_report_card(report_id: int, deleted_by: str, db: Session = Depends(get_db)):
    report_card_service.delete_report_card(db, report_id, deleted_by)
    return {
        "success": True,
        "data": {"report_id": report_id},
        "message": "성적표가 삭제되었습니다"
    }
