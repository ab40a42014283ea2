from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from models.exam_records import ExamAnswer, ExamRecord, RECORD_GRADED, RECORD_ONGOING
from models.exams import EXAM_DRAFT
from schemas.exam_records import ExamAnswerSubmit
from services.attempt_service import AttemptService
from services.errors import (
    DuplicateAttempt, InvalidState, NotFound, StoreError, ValidationError, WindowError,
)
from tests_helpers import fixed_clock, utcnow


def _answers(*pairs):
    return [ExamAnswerSubmit(question_id=qid, user_answer=ans) for qid, ans in pairs]


@pytest.fixture
def two_question_exam(make_bank, make_question, make_exam):
    bank = make_bank()
    q1 = make_question(bank, answer="A", score=5)
    q2 = make_question(bank, answer="B", score=10)
    return make_exam([q1, q2]), q1, q2


# ==========================================================
# start
# ==========================================================

def test_start_creates_ongoing_record(db, two_question_exam):
    exam, _, _ = two_question_exam

    record = AttemptService(db).start(exam.id, user_id=3)

    assert record.status == RECORD_ONGOING
    assert record.exam_id == exam.id
    assert record.user_id == 3
    assert record.end_time is None
    assert record.total_score is None
    assert exam.start_time <= record.start_time <= exam.end_time


def test_start_unknown_exam(db):
    with pytest.raises(NotFound):
        AttemptService(db).start(999, user_id=1)


def test_start_unpublished_exam(db, make_exam):
    exam = make_exam(status=EXAM_DRAFT)

    with pytest.raises(InvalidState):
        AttemptService(db).start(exam.id, user_id=1)


@pytest.mark.parametrize("offset", [timedelta(hours=-1), timedelta(days=2)])
def test_start_outside_window(db, make_exam, offset):
    now = utcnow()
    exam = make_exam(start=now, end=now + timedelta(days=1))
    service = AttemptService(db, clock=fixed_clock(now + offset))

    with pytest.raises(WindowError):
        service.start(exam.id, user_id=1)
    assert db.scalar(select(func.count(ExamRecord.id))) == 0


def test_start_window_bounds_are_inclusive(db, make_exam):
    now = utcnow()
    exam = make_exam(start=now, end=now + timedelta(hours=1))

    assert AttemptService(db, clock=fixed_clock(now)).start(exam.id, user_id=1)
    assert AttemptService(db, clock=fixed_clock(now + timedelta(hours=1))).start(exam.id, user_id=2)


def test_start_uses_store_clock_by_default(db, make_exam):
    now = utcnow()
    exam = make_exam(start=now + timedelta(days=1), end=now + timedelta(days=2))

    with pytest.raises(WindowError, match="시작되지"):
        AttemptService(db).start(exam.id, user_id=1)


def test_start_twice_is_duplicate(db, two_question_exam):
    exam, _, _ = two_question_exam
    service = AttemptService(db)
    service.start(exam.id, user_id=1)

    with pytest.raises(DuplicateAttempt):
        service.start(exam.id, user_id=1)
    # 다른 사용자는 가능
    assert service.start(exam.id, user_id=2).user_id == 2
    assert db.scalar(select(func.count(ExamRecord.id))) == 2


def test_start_loses_race_to_concurrent_start(db, two_question_exam, monkeypatch):
    exam, _, _ = two_question_exam
    now = utcnow()
    original_scalar = db.scalar

    # 중복 검사 쿼리 직후 다른 요청이 같은 (exam, user) 기록을 먼저 커밋한 상황
    def scalar_then_competing_commit(statement, *args, **kwargs):
        result = original_scalar(statement, *args, **kwargs)
        monkeypatch.setattr(db, "scalar", original_scalar)
        db.add(ExamRecord(exam_id=exam.id, user_id=1, start_time=now, status=RECORD_ONGOING))
        db.commit()
        return result

    monkeypatch.setattr(db, "scalar", scalar_then_competing_commit)

    with pytest.raises(DuplicateAttempt):
        AttemptService(db, clock=fixed_clock(now)).start(exam.id, user_id=1)

    assert db.scalar(
        select(func.count(ExamRecord.id)).where(
            ExamRecord.exam_id == exam.id, ExamRecord.user_id == 1
        )
    ) == 1


def test_start_read_failure_is_store_error(db, two_question_exam, monkeypatch):
    exam, _, _ = two_question_exam

    def broken_get(*args, **kwargs):
        raise OperationalError("SELECT exams", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "get", broken_get)

    with pytest.raises(StoreError):
        AttemptService(db).start(exam.id, user_id=1)


def test_unique_constraint_guards_exam_user_pair(db, two_question_exam):
    exam, _, _ = two_question_exam
    now = utcnow()
    db.add(ExamRecord(exam_id=exam.id, user_id=1, start_time=now, status=RECORD_ONGOING))
    db.commit()

    db.add(ExamRecord(exam_id=exam.id, user_id=1, start_time=now, status=RECORD_ONGOING))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


# ==========================================================
# submit / grading
# ==========================================================

def test_submit_all_correct(db, two_question_exam):
    exam, q1, q2 = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    graded = service.submit(record.id, _answers((q1.id, "A"), (q2.id, "B")))

    assert graded.status == RECORD_GRADED
    assert graded.total_score == 15
    assert [a.is_correct for a in graded.answers] == [True, True]
    assert [a.score for a in graded.answers] == [5, 10]


def test_submit_partially_correct(db, two_question_exam):
    exam, q1, q2 = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    graded = service.submit(record.id, _answers((q1.id, "A"), (q2.id, "C")))

    assert graded.total_score == 5
    second = next(a for a in graded.answers if a.question_id == q2.id)
    assert second.is_correct is False
    assert second.score == 0
    assert second.user_answer == "C"


@pytest.mark.parametrize("answer", ["a", "A ", " A", "A,"])
def test_grading_is_exact_match(db, two_question_exam, answer):
    exam, q1, _ = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    graded = service.submit(record.id, _answers((q1.id, answer)))

    assert graded.total_score == 0
    assert graded.answers[0].is_correct is False


def test_unanswered_questions_produce_no_rows(db, two_question_exam):
    exam, _, q2 = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    graded = service.submit(record.id, _answers((q2.id, "B")))

    assert graded.total_score == 10
    assert [a.question_id for a in graded.answers] == [q2.id]


def test_submit_empty_answer_set(db, two_question_exam):
    exam, _, _ = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    graded = service.submit(record.id, [])

    assert graded.status == RECORD_GRADED
    assert graded.total_score == 0
    assert graded.answers == []


def test_submit_records_duration_and_end_time(db, two_question_exam):
    exam, q1, _ = two_question_exam
    started = utcnow()
    record = AttemptService(db, clock=fixed_clock(started)).start(exam.id, user_id=1)

    finished = started + timedelta(minutes=12, seconds=30, microseconds=900000)
    graded = AttemptService(db, clock=fixed_clock(finished)).submit(record.id, _answers((q1.id, "A")))

    assert graded.duration == 750
    assert graded.end_time is not None


def test_resubmit_is_rejected_without_rescoring(db, two_question_exam):
    exam, q1, q2 = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)
    service.submit(record.id, _answers((q1.id, "A"), (q2.id, "C")))

    with pytest.raises(InvalidState):
        service.submit(record.id, _answers((q1.id, "A"), (q2.id, "B")))

    again = service.get_record(record.id)
    assert again.total_score == 5
    assert len(again.answers) == 2


def test_submit_unknown_record(db):
    with pytest.raises(NotFound):
        AttemptService(db).submit(999, [])


def test_submit_unknown_question_rolls_back(db, two_question_exam):
    exam, q1, _ = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    with pytest.raises(NotFound):
        service.submit(record.id, _answers((q1.id, "A"), (9999, "A")))

    untouched = service.get_record(record.id)
    assert untouched.status == RECORD_ONGOING
    assert untouched.end_time is None
    assert untouched.duration is None
    assert untouched.total_score is None
    assert db.scalar(select(func.count(ExamAnswer.id))) == 0

    # 롤백 후 정상 제출 가능
    assert service.submit(record.id, _answers((q1.id, "A"))).total_score == 5


def test_submit_duplicate_question_ids(db, two_question_exam):
    exam, q1, _ = two_question_exam
    service = AttemptService(db)
    record = service.start(exam.id, user_id=1)

    with pytest.raises(ValidationError):
        service.submit(record.id, _answers((q1.id, "A"), (q1.id, "A")))
    assert service.get_record(record.id).status == RECORD_ONGOING


def test_list_records_newest_first(db, make_exam):
    now = utcnow()
    older = make_exam()
    newer = make_exam()
    AttemptService(db, clock=fixed_clock(now - timedelta(hours=2))).start(older.id, user_id=1)
    AttemptService(db, clock=fixed_clock(now)).start(newer.id, user_id=1)
    AttemptService(db, clock=fixed_clock(now)).start(newer.id, user_id=2)

    items, total = AttemptService(db).list_records(1, 1, 20)

    assert total == 2
    assert [r.exam_id for r in items] == [newer.id, older.id]
