from sqlalchemy import Column, Integer, Float, String
from database.db import Base

class StudentMark(Base):
    __tablename__ = "student_marks"  # 과목별 시험 성적 테이블 (시험 x 학생 x 과목)

    id = Column(Integer, primary_key=True, index=True)           # 성적 고유 ID
    exam_id = Column(Integer, index=True, nullable=False)        # 시험 ID (exams.id)
    student_id = Column(String(50), index=True, nullable=False)  # 학생 업무 ID
    class_id = Column(String(50), index=True, nullable=False)    # 학급 코드
    subject_name = Column(String(100), nullable=False)           # 과목 이름
    class_score = Column(Float, default=0)                       # 수행평가 점수
    exam_score = Column(Float, default=0)                        # 지필평가 점수
    total_score = Column(Float, nullable=False)                  # 합계 (class_score + exam_score)
    max_marks = Column(Float, nullable=False)                     # 만점
    percentage = Column(Float)                                   # 백분율
    position = Column(Integer)                                   # 과목 내 석차 (선택)
    grade_number = Column(Integer)                               # 과목 등급 (선택)
    remarks = Column(String(100))                                # 과목 평어
