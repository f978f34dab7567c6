from sqlalchemy import Column, Integer, String
from database.db import Base

class Exam(Base):
    __tablename__ = "exams"  # 시험 정보 테이블

    id = Column(Integer, primary_key=True, index=True)          # 시험 고유 ID
    school_id = Column(String(50), index=True, nullable=False)  # 소속 학교 코드
    exam_name = Column(String(100), nullable=False)             # 시험명 (예: 1학기 기말고사)
    academic_year_id = Column(String(50))                       # 학년도 코드 (academic_years.year_code)
    term_id = Column(String(50))                                # 학기 코드 (terms.term_code)
    created_by = Column(String(64))                             # 시험 생성자 ID
