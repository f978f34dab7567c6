from sqlalchemy import Column, Integer, Float, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

class ReportCard(Base):
    __tablename__ = "report_cards"  # 학생별 학기 성적표 (학교 x 학생 x 학년도 x 학기 당 1건)

    id = Column(Integer, primary_key=True, index=True)          # 성적표 고유 ID (PK)

    # ==========================================================
    # [식별 정보]
    # ==========================================================
    school_id = Column(String(50), index=True, nullable=False)  # 학교 코드
    report_code = Column(String(20), unique=True, nullable=False)  # 표시용 코드 (RPT########)
    student_id = Column(String(50), index=True, nullable=False)  # 학생 업무 ID
    student_name = Column(String(200))                          # 학생 이름 (중복 저장)
    class_id = Column(String(50), index=True)                   # 학급 코드
    class_name = Column(String(100))                            # 학급명 (중복 저장)
    exam_id = Column(Integer)                                   # 생성 기준 시험 ID
    academic_year_id = Column(String(50))                       # 학년도 코드 (없을 수 있음)
    term_id = Column(String(50))                                # 학기 코드 (없을 수 있음)

    # ==========================================================
    # [표시용 중복 저장 정보]
    # ==========================================================
    academic_year_name = Column(String(100))
    term_name = Column(String(100))
    year = Column(String(20))
    house = Column(String(50))
    school_name = Column(String(200))
    school_address = Column(String(300))
    school_phone = Column(String(30))

    # ==========================================================
    # [계산 결과]
    # ==========================================================
    subjects = Column(Text, default="[]")        # 과목별 요약 JSON 배열
    raw_score = Column(Float)                    # 만점 합계 (이름과 달리 "가능한 최대 점수"의 합)
    total_score = Column(Float)                  # 취득 점수 합계
    percentage = Column(Float)                   # 총점 백분율
    overall_grade = Column(String(10))           # 종합 등급
    position = Column(Integer)                   # 반 석차 (1부터, 없으면 0)
    total_students = Column(Integer)             # 반 재적 인원 (졸업생 제외)
    grading_scale_id = Column(Integer)           # 사용한 채점 기준 ID (기본 등급표 사용 시 None)
    grading_scale_name = Column(String(100))

    # ==========================================================
    # [교사 입력 항목] - 계산하지 않고 그대로 저장
    # ==========================================================
    attendance = Column(String(200))             # JSON: {"present": 64, "total": 68}
    conduct = Column(String(200))
    attitude = Column(String(200))
    interest = Column(String(200))
    class_teacher_comment = Column(Text)
    headmaster_comment = Column(Text)
    class_teacher_sign = Column(String(200))
    headmaster_sign = Column(String(200))
    promotion_status = Column(String(50))
    promoted_to = Column(String(100))
    vacation_date = Column(String(40))
    reopening_date = Column(String(40))
    termly_performance = Column(String(200))     # JSON: {"term1": 497, "term2": 562, "term3": null}

    # ==========================================================
    # [상태/버전 관리]
    # ==========================================================
    status = Column(String(20), default="draft", index=True)  # draft / generated / published / archived
    version = Column(Integer, default=1)
    previous_version_id = Column(Integer)        # 재생성 시 자기 자신의 ID가 기록됨
    generated_at = Column(String(40))
    created_by = Column(String(64))
    created_at = Column(String(40))
    updated_at = Column(String(40))

    published_at = Column(String(40))
    published_by = Column(String(64))
    published_by_role = Column(String(20))       # class_teacher / admin
    unpublished_at = Column(String(40))
    unpublished_by = Column(String(64))
    unpublish_reason = Column(String(500))

    reviewed_by = Column(String(64))
    reviewed_by_name = Column(String(100))
    reviewed_at = Column(String(40))
    review_notes = Column(Text)
    verified_by_class_teacher = Column(Boolean, default=False)

    # ✅ 버전 스냅샷 (REPORT_VERSION_HISTORY 활성화 시에만 쌓임)
    versions = relationship(
        "ReportCardVersion",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportCardVersion.version_number",
    )


class ReportCardVersion(Base):
    __tablename__ = "report_card_versions"  # 재생성 직전 성적표 값의 스냅샷 (append-only)

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("report_cards.id"), index=True, nullable=False)
    version_number = Column(Integer, nullable=False)   # 스냅샷이 담고 있는 버전 번호
    snapshot = Column(Text, nullable=False)            # 계산/입력 필드 JSON
    created_at = Column(String(40))

    report = relationship("ReportCard", back_populates="versions")
