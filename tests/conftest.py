import os
from datetime import timedelta

# 앱 import 전에 지정 (MySQL 드라이버 없이도 엔진 생성 가능하도록)
os.environ.setdefault("DB_DSN", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import get_db, init_db
from dependencies.security import create_access_token
from main import app
from models.exams import Exam, EXAM_PUBLISHED
from models.question_banks import QuestionBank
from models.questions import Question
from models.users import User, ROLE_ADMIN, ROLE_EMPLOYEE
from services.user_service import hash_password
from tests_helpers import utcnow


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ==========================================================
# 데이터 생성 헬퍼
# ==========================================================

@pytest.fixture
def make_user(db):
    def _make(username="user1", password="secret", role=ROLE_EMPLOYEE, status=1):
        user = User(
            username=username,
            password_hash=hash_password(password),
            name=username,
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_bank(db):
    def _make(subject="math", name=None, created_by=1):
        bank = QuestionBank(name=name or f"{subject} bank", subject=subject, created_by=created_by)
        db.add(bank)
        db.commit()
        db.refresh(bank)
        return bank
    return _make


@pytest.fixture
def make_question(db):
    def _make(bank, answer="A", score=5.0, difficulty="", content="Q?"):
        question = Question(
            bank_id=bank.id,
            type="single",
            content=content,
            options='["A","B","C","D"]',
            answer=answer,
            score=score,
            difficulty=difficulty,
            created_by=1,
        )
        db.add(question)
        db.commit()
        db.refresh(question)
        return question
    return _make


@pytest.fixture
def make_exam(db):
    """문항 목록을 그대로 연결한 시험지 (생성기를 거치지 않음)"""
    from models.exams import ExamQuestion

    def _make(questions=(), status=EXAM_PUBLISHED, start=None, end=None):
        now = utcnow()
        exam = Exam(
            title="exam",
            subject="math",
            total_score=sum(q.score for q in questions),
            duration=60,
            start_time=start or now - timedelta(days=1),
            end_time=end or now + timedelta(days=1),
            status=status,
            created_by=1,
        )
        exam.question_links = [
            ExamQuestion(question_id=q.id, sequence=i) for i, q in enumerate(questions, start=1)
        ]
        db.add(exam)
        db.commit()
        db.refresh(exam)
        return exam
    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.username, user.role)}"}
    return _header


@pytest.fixture
def admin(make_user):
    return make_user(username="admin", password="Admin@123", role=ROLE_ADMIN)
