from sqlalchemy import Column, Integer, String
from database.db import Base

class AcademicYear(Base):
    __tablename__ = "academic_years"  # 학년도 테이블

    id = Column(Integer, primary_key=True, index=True)
    school_id = Column(String(50), index=True, nullable=False)
    year_code = Column(String(50), unique=True, index=True, nullable=False)  # 예: AY2025
    year_name = Column(String(100), nullable=False)                          # 예: 2025/2026
