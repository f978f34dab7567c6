import csv
import sys
from sqlalchemy.orm import Session
from database.db import SessionLocal, init_db
from models.student_marks import StudentMark as StudentMarkModel  # ✅ 모델 import
from services.grade_calculator import default_grade
from services.marks_aggregator import overall_percentage

CSV_PATH = "data/student_marks.csv"  # ✅ 기본 파일 경로

# CSV 헤더: exam_id, student_id, class_id, subject_name, class_score, exam_score, max_marks


def import_marks(db: Session, csv_path: str = CSV_PATH) -> int:
    """
    과목 성적 CSV → student_marks
    - total_score / percentage / grade_number / remarks 는 행마다 계산
    - 같은 (시험, 학생, 과목) 행이 있으면 덮어씀
    """
    count = 0
    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            exam_id = int(row["exam_id"])
            student_id = row["student_id"].strip()
            subject_name = row["subject_name"].strip()
            class_score = float(row.get("class_score") or 0)
            exam_score = float(row.get("exam_score") or 0)
            max_marks = float(row["max_marks"])

            total_score = class_score + exam_score                       # 합계
            percentage = overall_percentage(total_score, max_marks)      # 백분율
            grade = default_grade(percentage)                            # 과목 등급 (고정 등급표)

            mark = (
                db.query(StudentMarkModel)
                .filter(
                    StudentMarkModel.exam_id == exam_id,
                    StudentMarkModel.student_id == student_id,
                    StudentMarkModel.subject_name == subject_name,
                )
                .first()
            )
            if mark is None:
                mark = StudentMarkModel(exam_id=exam_id, student_id=student_id, subject_name=subject_name)
                db.add(mark)

            mark.class_id = row["class_id"].strip()
            mark.class_score = class_score
            mark.exam_score = exam_score
            mark.total_score = total_score
            mark.max_marks = max_marks
            mark.percentage = percentage
            mark.grade_number = int(grade.grade)
            mark.remarks = grade.remark
            db.flush()  # 같은 파일 안의 중복 행도 조회되도록
            count += 1

    db.commit()
    return count


if __name__ == "__main__":
    init_db()
    db: Session = SessionLocal()
    try:
        imported = import_marks(db, sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    finally:
        db.close()
    print(f"✅ 과목 성적 CSV → DB 마이그레이션 완료 ({imported}건)")
