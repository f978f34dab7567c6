"""
Shared fixtures: in-memory SQLite database seeded with one school.
"""

import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from database.db import Base, init_db
from models.academic_years import AcademicYear
from models.classes import Class
from models.exams import Exam
from models.school_admins import SchoolAdmin
from models.schools import School
from models.student_marks import StudentMark
from models.students import Student
from models.teachers import Teacher
from models.terms import Term

SCHOOL_ID = "SCH001"
OTHER_SCHOOL_ID = "SCH999"
CLASS_CODE = "CLS-JHS1A"
ADMIN_ID = "admin-1"
TEACHER_ID = "teacher-1"
OUTSIDER_ID = "admin-x"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def school(db):
    """One school with an admin, a teacher, a class of three active students and one graduate."""
    db.add_all([
        School(school_id=SCHOOL_ID, name="Hillside Academy", address="12 Ridge Rd", phone="0302000000"),
        School(school_id=OTHER_SCHOOL_ID, name="Other School"),
        SchoolAdmin(id=ADMIN_ID, school_id=SCHOOL_ID, name="Head Admin"),
        Teacher(id=TEACHER_ID, school_id=SCHOOL_ID, name="Class Teacher"),
        SchoolAdmin(id=OUTSIDER_ID, school_id=OTHER_SCHOOL_ID, name="Outsider"),
        Class(school_id=SCHOOL_ID, class_code=CLASS_CODE, class_name="JHS 1A", department="junior_high"),
        Student(student_id="STU001", school_id=SCHOOL_ID, first_name="Ama", last_name="Mensah", class_id=CLASS_CODE, status="active"),
        Student(student_id="STU002", school_id=SCHOOL_ID, first_name="Kofi", last_name="Boateng", class_id=CLASS_CODE, status="active"),
        Student(student_id="STU003", school_id=SCHOOL_ID, first_name="Yaw", last_name="Asante", class_id=CLASS_CODE, status="active"),
        Student(student_id="STU004", school_id=SCHOOL_ID, first_name="Esi", last_name="Owusu", class_id=CLASS_CODE, status="graduated"),
        AcademicYear(school_id=SCHOOL_ID, year_code="AY2025", year_name="2025/2026"),
        Term(school_id=SCHOOL_ID, term_code="T1-2025", term_name="First Term"),
    ])
    exam = Exam(
        school_id=SCHOOL_ID,
        exam_name="End of First Term",
        academic_year_id="AY2025",
        term_id="T1-2025",
        created_by=ADMIN_ID,
    )
    db.add(exam)
    db.commit()
    return {"exam_id": exam.id}


def add_marks(db, exam_id, student_id, rows, class_id=CLASS_CODE):
    """rows: [(subject_name, total_score, max_marks), ...]"""
    for subject_name, total, max_marks in rows:
        db.add(StudentMark(
            exam_id=exam_id,
            student_id=student_id,
            class_id=class_id,
            subject_name=subject_name,
            class_score=total * 0.3,
            exam_score=total * 0.7,
            total_score=total,
            max_marks=max_marks,
            percentage=(total / max_marks * 100) if max_marks else None,
        ))
    db.commit()


@pytest.fixture
def marks(db, school):
    """Ama 170/200, Kofi 150/200, Yaw 120/200."""
    exam_id = school["exam_id"]
    add_marks(db, exam_id, "STU001", [("English", 80, 100), ("Mathematics", 90, 100)])
    add_marks(db, exam_id, "STU002", [("English", 70, 100), ("Mathematics", 80, 100)])
    add_marks(db, exam_id, "STU003", [("English", 60, 100), ("Mathematics", 60, 100)])
    return exam_id
