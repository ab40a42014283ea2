"""
services/exam_service.py

시험지 생성기
- 조건(과목/난이도/문항 수)으로 문항을 무작위 추출해 시험지를 만든다.
- 시험지 행과 문항 연결 행은 하나의 트랜잭션으로 저장 (일부만 저장된 시험지는 남지 않음)
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from config.settings import settings
from models.exams import Exam, ExamQuestion, EXAM_PUBLISHED
from schemas.exams import ExamGenerate
from services.base import clamp_page, reading, transaction
from services.errors import NotFound, ValidationError
from services.question_service import QuestionService

logger = logging.getLogger(__name__)


def parse_exam_time(value: str, field: str) -> datetime:
    """
    고정 포맷(YYYY-MM-DD HH:MM:SS) 시각 문자열 파싱
    - 0 채움이 빠진 값(2024-1-1 9:00:00)은 strptime 이 받아주므로 재포맷 결과와 비교해 거부
    """
    label = "시작" if field == "start_time" else "종료"
    message = f"{label} 시간 형식이 올바르지 않습니다 (예: 2024-01-01 09:00:00)"
    try:
        parsed = datetime.strptime(value, settings.EXAM_TIME_FORMAT)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if parsed.strftime(settings.EXAM_TIME_FORMAT) != value:
        raise ValidationError(message)
    return parsed


class ExamService:
    def __init__(self, db: Session, questions: QuestionService = None):
        self.db = db
        self.questions = questions or QuestionService(db)

    def generate(self, spec: ExamGenerate, created_by: int) -> Exam:
        start_time = parse_exam_time(spec.start_time, "start_time")
        end_time = parse_exam_time(spec.end_time, "end_time")
        if end_time <= start_time:
            raise ValidationError("종료 시간은 시작 시간보다 늦어야 합니다")

        sampled = self.questions.sample_random(spec.subject, spec.difficulty, spec.question_count)
        if not sampled:
            raise ValidationError("조건에 맞는 문항이 없습니다")
        if len(sampled) < spec.question_count:
            if not settings.EXAM_ALLOW_UNDERFILL:
                raise ValidationError(
                    f"조건에 맞는 문항이 부족합니다 (요청 {spec.question_count}개, 보유 {len(sampled)}개)"
                )
            logger.warning(
                f"문항 부족으로 일부만 출제: subject={spec.subject}, difficulty={spec.difficulty!r}, "
                f"requested={spec.question_count}, sampled={len(sampled)}"
            )

        total_score = sum(q.score for q in sampled)

        exam = Exam(
            title=spec.title,
            description=spec.description,
            subject=spec.subject,
            total_score=total_score,
            duration=spec.duration,
            start_time=start_time,
            end_time=end_time,
            status=EXAM_PUBLISHED,
            created_by=created_by,
        )
        exam.question_links = [
            ExamQuestion(question=q, sequence=seq) for seq, q in enumerate(sampled, start=1)
        ]

        with transaction(self.db):
            self.db.add(exam)

        logger.info(
            f"시험지 생성: id={exam.id}, questions={len(sampled)}, total_score={total_score}"
        )
        return self.get_exam(exam.id)

    def get_exam(self, exam_id: int) -> Exam:
        with reading(self.db):
            exam = self.db.scalar(
                select(Exam)
                .options(selectinload(Exam.question_links).selectinload(ExamQuestion.question))
                .where(Exam.id == exam_id)
            )
        if exam is None:
            raise NotFound("시험지가 존재하지 않습니다")
        return exam

    def list_exams(self, subject: Optional[str], page: int, page_size: int) -> Tuple[List[Exam], int]:
        page, page_size = clamp_page(page, page_size)

        stmt = select(Exam)
        if subject:
            stmt = stmt.where(Exam.subject == subject)

        with reading(self.db):
            total = self.db.scalar(select(func.count()).select_from(stmt.subquery()))
            items = self.db.scalars(
                stmt.order_by(Exam.start_time.desc(), Exam.id.desc())
                .limit(page_size)
                .offset((page - 1) * page_size)
            ).all()
        return list(items), total
