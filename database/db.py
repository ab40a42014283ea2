from datetime import datetime

from sqlalchemy import create_engine, func, select  # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기


def _engine_options(url: str) -> dict:
    # SQLite는 커넥션 풀 옵션을 받지 않음
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


# ✅ 요청 단위 세션 (FastAPI Depends 용)
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def store_now(db: Session) -> datetime:
    """DB 서버 기준 현재 시각 (애플리케이션/DB 간 시계 차이 방지)"""
    return db.scalar(select(func.now()))


def init_db(bind=None):
    """모든 모델 테이블 생성 (없을 때만)"""
    from models import users, question_banks, questions, exams, exam_records  # noqa: F401  모델 등록용

    Base.metadata.create_all(bind=bind or engine)
