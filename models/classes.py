from sqlalchemy import Column, Integer, String
from database.db import Base

class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)                 # 학급 고유 ID (PK)
    school_id = Column(String(50), index=True, nullable=False)         # 소속 학교 코드
    class_code = Column(String(50), unique=True, index=True, nullable=False)  # 학급 업무 코드 (예: CLS-JHS1A)
    class_name = Column(String(100), nullable=False)                   # 학급명 (예: JHS 1A)

    # ✅ 학부(department) - 학부별 채점 기준 선택에 사용
    #    creche / kindergarten / primary / junior_high (없으면 학교 기본 기준)
    department = Column(String(50))
