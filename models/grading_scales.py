from sqlalchemy import Column, Integer, String, Boolean, Text
from database.db import Base

class GradingScale(Base):
    __tablename__ = "grading_scales"  # 학교/학부별 채점 기준 테이블

    id = Column(Integer, primary_key=True, index=True)
    school_id = Column(String(50), index=True, nullable=False)   # 소속 학교 코드
    scale_code = Column(String(20), nullable=False)              # 기준 코드 (GRD######)
    scale_name = Column(String(100), nullable=False)             # 기준 이름
    department = Column(String(50))                              # 학부 한정 기준 (없으면 학교 공통)

    # ✅ 등급 구간 목록 JSON 문자열
    #    [{"grade": 1, "minPercent": 80, "maxPercent": 100, "remark": "Excellent"}, ...]
    grades = Column(Text, nullable=False)

    is_default = Column(Boolean, default=False, index=True)      # 학교 기본 기준 여부
    status = Column(String(20), default="active")                # active / inactive
    created_by = Column(String(64))
    created_at = Column(String(40))                              # ISO-8601 문자열
    updated_at = Column(String(40))
