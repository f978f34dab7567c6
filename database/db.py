from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base        # 모델의 Base 클래스
from sqlalchemy.orm import sessionmaker            # 세션 팩토리 함수

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

# ✅ SQLite는 요청 스레드가 바뀌어도 같은 연결을 쓸 수 있게 설정
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def init_db(bind=None):
    """모든 모델을 등록한 뒤 테이블 생성 (이미 있으면 건너뜀)"""
    # 모델 모듈을 import 해야 Base.metadata에 테이블이 등록됨
    from models import (  # noqa: F401
        academic_years, classes, exams, grading_scales, report_cards,
        school_admins, schools, student_marks, students, teachers, terms,
    )

    Base.metadata.create_all(bind=bind or engine)
