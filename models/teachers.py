import uuid
from sqlalchemy import Column, String
from database.db import Base

class Teacher(Base):
    __tablename__ = "teachers"  # 교사 테이블 (권한 확인용)

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)  # 호출자 ID (PK)
    school_id = Column(String(50), index=True, nullable=False)   # 소속 학교 코드
    name = Column(String(100), nullable=False)                   # 교사 이름
    email = Column(String(100), unique=True)                     # 이메일
    subject = Column(String(100))                                # 담당 과목
