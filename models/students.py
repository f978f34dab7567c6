from sqlalchemy import Column, Integer, String
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                 # 고유 ID (Primary Key)
    student_id = Column(String(50), unique=True, index=True, nullable=False)  # 학생 업무 ID (학번)
    school_id = Column(String(50), index=True, nullable=False)         # 소속 학교 코드
    first_name = Column(String(100), nullable=False)                   # 이름
    last_name = Column(String(100), nullable=False)                    # 성
    class_id = Column(String(50), index=True)                          # 소속 학급 코드 (classes.class_code)
    status = Column(String(20), default="active")                      # 재학 상태 (active, graduated 등)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
