from sqlalchemy import Column, Integer, String
from database.db import Base

class Term(Base):
    __tablename__ = "terms"  # 학기 테이블

    id = Column(Integer, primary_key=True, index=True)
    school_id = Column(String(50), index=True, nullable=False)
    term_code = Column(String(50), unique=True, index=True, nullable=False)  # 예: T1-2025
    term_name = Column(String(100), nullable=False)                          # 예: First Term
