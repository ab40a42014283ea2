from datetime import datetime

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from models.exams import Exam, ExamQuestion, EXAM_PUBLISHED
from schemas.exams import ExamGenerate
from services.errors import NotFound, StoreError, ValidationError
from services.exam_service import ExamService


def _spec(**overrides):
    data = dict(
        title="3기 기초 시험",
        description="월간 평가",
        subject="math",
        duration=60,
        start_time="2024-01-01 09:00:00",
        end_time="2024-01-01 11:00:00",
        question_count=2,
        difficulty="",
    )
    data.update(overrides)
    return ExamGenerate(**data)


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


def test_generate_sums_scores_and_orders_links(db, make_bank, make_question):
    bank = make_bank()
    make_question(bank, score=5)
    make_question(bank, score=10)
    make_question(bank, score=2.5)

    exam = ExamService(db).generate(_spec(question_count=3), created_by=42)

    assert exam.status == EXAM_PUBLISHED
    assert exam.created_by == 42
    assert exam.total_score == pytest.approx(17.5)
    assert exam.total_score == pytest.approx(sum(q.score for q in exam.questions))
    assert [link.sequence for link in exam.question_links] == [1, 2, 3]
    assert exam.start_time == datetime(2024, 1, 1, 9, 0, 0)
    assert exam.end_time == datetime(2024, 1, 1, 11, 0, 0)


def test_total_score_is_not_recomputed(db, make_bank, make_question):
    bank = make_bank()
    question = make_question(bank, score=5)
    exam = ExamService(db).generate(_spec(question_count=1), created_by=1)

    question.score = 50
    db.commit()

    assert ExamService(db).get_exam(exam.id).total_score == 5


@pytest.mark.parametrize("start, end", [
    ("2024-01-01 11:00:00", "2024-01-01 09:00:00"),
    ("2024-01-01 09:00:00", "2024-01-01 09:00:00"),
])
def test_generate_rejects_bad_window(db, make_bank, make_question, start, end):
    make_question(make_bank())

    with pytest.raises(ValidationError):
        ExamService(db).generate(_spec(start_time=start, end_time=end), created_by=1)
    assert _count(db, Exam) == 0


@pytest.mark.parametrize("field", ["start_time", "end_time"])
def test_generate_rejects_bad_time_format(db, make_bank, make_question, field):
    make_question(make_bank())

    with pytest.raises(ValidationError):
        ExamService(db).generate(_spec(**{field: "2024/01/01 09:00"}), created_by=1)
    assert _count(db, Exam) == 0


@pytest.mark.parametrize("value", ["2024-1-1 9:00:00", "2024-01-01 9:00:00", " 2024-01-01 09:00:00"])
def test_generate_requires_zero_padded_time(db, make_bank, make_question, value):
    make_question(make_bank())

    with pytest.raises(ValidationError, match="시작 시간"):
        ExamService(db).generate(_spec(start_time=value), created_by=1)
    assert _count(db, Exam) == 0


def test_generate_without_matches_fails(db, make_bank, make_question):
    make_question(make_bank(subject="nursing"))

    with pytest.raises(ValidationError):
        ExamService(db).generate(_spec(), created_by=1)
    assert _count(db, Exam) == 0


def test_generate_underfill_allowed_by_default(db, make_bank, make_question):
    make_question(make_bank())

    exam = ExamService(db).generate(_spec(question_count=10), created_by=1)
    assert len(exam.questions) == 1


def test_generate_underfill_can_be_rejected(db, make_bank, make_question, monkeypatch):
    make_question(make_bank())
    monkeypatch.setattr(settings, "EXAM_ALLOW_UNDERFILL", False)

    with pytest.raises(ValidationError):
        ExamService(db).generate(_spec(question_count=10), created_by=1)
    assert _count(db, Exam) == 0


def test_generate_difficulty_filter(db, make_bank, make_question):
    bank = make_bank()
    hard = make_question(bank, difficulty="hard")
    make_question(bank, difficulty="easy")

    exam = ExamService(db).generate(_spec(question_count=5, difficulty="hard"), created_by=1)
    assert [q.id for q in exam.questions] == [hard.id]


def test_generate_is_atomic(db, make_bank, make_question):
    bank = make_bank()
    make_question(bank)
    make_question(bank)

    def fail_link_insert(mapper, connection, target):
        raise SQLAlchemyError("link insert failed")

    event.listen(ExamQuestion, "before_insert", fail_link_insert)
    try:
        with pytest.raises(StoreError):
            ExamService(db).generate(_spec(), created_by=1)
    finally:
        event.remove(ExamQuestion, "before_insert", fail_link_insert)

    assert _count(db, Exam) == 0
    assert _count(db, ExamQuestion) == 0


def test_get_exam_not_found(db):
    with pytest.raises(NotFound):
        ExamService(db).get_exam(1)


def test_list_exams_filters_and_pages(db, make_bank, make_question):
    make_question(make_bank(subject="math"))
    make_question(make_bank(subject="nursing"))
    service = ExamService(db)
    service.generate(_spec(subject="math", question_count=1), created_by=1)
    service.generate(_spec(subject="math", question_count=1, start_time="2024-02-01 09:00:00",
                           end_time="2024-02-01 10:00:00"), created_by=1)
    service.generate(_spec(subject="nursing", question_count=1), created_by=1)

    items, total = service.list_exams("math", 1, 20)
    assert total == 2
    assert items[0].start_time > items[1].start_time

    _, total = service.list_exams(None, 1, 20)
    assert total == 3
