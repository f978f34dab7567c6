from sqlalchemy import Column, Integer, String
from database.db import Base

class School(Base):
    __tablename__ = "schools"  # 학교(테넌트) 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                 # 고유 ID (PK)
    school_id = Column(String(50), unique=True, index=True, nullable=False)  # 학교 업무 코드 (예: SCH001)
    name = Column(String(200), nullable=False)                        # 학교 이름
    address = Column(String(300))                                     # 주소 (성적표 표기용)
    phone = Column(String(30))                                        # 전화번호 (성적표 표기용)
