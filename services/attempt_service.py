"""
services/attempt_service.py

응시 상태 머신: ongoing → submitted → graded
- start: 시험지 상태/응시 가능 시간/중복 응시 검사 후 응시 기록 생성
- submit: 제출 → 채점 → 총점 기록을 하나의 트랜잭션으로 처리
  (외부에서는 ongoing 또는 graded 만 보이며, 중간 상태는 커밋되지 않음)
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from database.db import store_now
from models.exam_records import (
    ExamRecord, RECORD_GRADED, RECORD_ONGOING, RECORD_SUBMITTED,
)
from models.exams import Exam, EXAM_PUBLISHED
from schemas.exam_records import ExamAnswerSubmit
from services.base import clamp_page, reading, transaction
from services.errors import (
    DuplicateAttempt, InvalidState, NotFound, ValidationError, WindowError,
)
from services.grading_service import GradingService

logger = logging.getLogger(__name__)


class AttemptService:
    def __init__(
        self,
        db: Session,
        grader: GradingService = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.grader = grader or GradingService(db)
        # 기본값은 DB 서버 시각
        self.clock = clock or (lambda: store_now(self.db))

    # ==========================================================
    # 응시 시작
    # ==========================================================

    def start(self, exam_id: int, user_id: int) -> ExamRecord:
        with reading(self.db):
            exam = self.db.get(Exam, exam_id)
            if exam is None:
                raise NotFound("시험지가 존재하지 않습니다")
            if exam.status != EXAM_PUBLISHED:
                raise InvalidState("시험지가 아직 공개되지 않았습니다")

            now = self.clock()
            if now < exam.start_time:
                raise WindowError("시험이 아직 시작되지 않았습니다")
            if now > exam.end_time:
                raise WindowError("시험이 이미 종료되었습니다")

            # 빠른 경로 검사. 최종 판단은 (exam_id, user_id) 유니크 제약
            exists = self.db.scalar(
                select(func.count(ExamRecord.id)).where(
                    ExamRecord.exam_id == exam_id, ExamRecord.user_id == user_id
                )
            )
        if exists:
            raise DuplicateAttempt()

        record = ExamRecord(
            exam_id=exam_id,
            user_id=user_id,
            start_time=now,
            status=RECORD_ONGOING,
        )
        with transaction(self.db):
            self.db.add(record)
            try:
                self.db.flush()
            except IntegrityError as exc:
                raise DuplicateAttempt() from exc

        self.db.refresh(record)
        logger.info(f"응시 시작: record_id={record.id}, exam_id={exam_id}, user_id={user_id}")
        return record

    # ==========================================================
    # 답안 제출 + 채점
    # ==========================================================

    def submit(self, record_id: int, answers: Iterable[ExamAnswerSubmit]) -> ExamRecord:
        answers = list(answers)
        question_ids = [a.question_id for a in answers]
        if len(question_ids) != len(set(question_ids)):
            raise ValidationError("같은 문항에 대한 답안이 중복되었습니다")

        with transaction(self.db):
            record = self.db.scalar(
                select(ExamRecord).where(ExamRecord.id == record_id).with_for_update()
            )
            if record is None:
                raise NotFound("응시 기록이 존재하지 않습니다")
            if record.status != RECORD_ONGOING:
                raise InvalidState("이미 제출되었거나 종료된 시험입니다")

            now = self.clock()
            record.end_time = now
            record.duration = max(0, int((now - record.start_time).total_seconds()))
            record.status = RECORD_SUBMITTED
            self.db.flush()

            record.total_score = self.grader.grade(record, answers)
            record.status = RECORD_GRADED

        logger.info(
            f"채점 완료: record_id={record_id}, answers={len(answers)}, total_score={record.total_score}"
        )
        return self.get_record(record_id)

    # ==========================================================
    # 조회
    # ==========================================================

    def get_record(self, record_id: int) -> ExamRecord:
        with reading(self.db):
            record = self.db.scalar(
                select(ExamRecord)
                .options(selectinload(ExamRecord.answers))
                .where(ExamRecord.id == record_id)
            )
        if record is None:
            raise NotFound("응시 기록이 존재하지 않습니다")
        return record

    def list_records(self, user_id: int, page: int, page_size: int) -> Tuple[List[ExamRecord], int]:
        page, page_size = clamp_page(page, page_size)

        with reading(self.db):
            total = self.db.scalar(
                select(func.count(ExamRecord.id)).where(ExamRecord.user_id == user_id)
            )
            items = self.db.scalars(
                select(ExamRecord)
                .where(ExamRecord.user_id == user_id)
                .order_by(ExamRecord.start_time.desc(), ExamRecord.id.desc())
                .limit(page_size)
                .offset((page - 1) * page_size)
            ).all()
        return list(items), total
