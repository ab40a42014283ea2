"""
services/question_service.py

문제은행/문항 저장소
- 문제은행 생성·조회·목록
- 문항 생성·조회·목록
- 출제용 무작위 추출 (sample_random)
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.question_banks import QuestionBank
from models.questions import Question
from schemas.question_banks import QuestionBankCreate
from schemas.questions import QuestionCreate
from services.base import clamp_page, reading, transaction
from services.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


class QuestionService:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # 문제은행
    # ==========================================================

    def create_bank(self, spec: QuestionBankCreate, created_by: int) -> QuestionBank:
        bank = QuestionBank(**spec.model_dump(), created_by=created_by)
        with transaction(self.db):
            self.db.add(bank)
        self.db.refresh(bank)
        logger.info(f"문제은행 생성: id={bank.id}, subject={bank.subject}")
        return bank

    def get_bank(self, bank_id: int) -> QuestionBank:
        with reading(self.db):
            bank = self.db.get(QuestionBank, bank_id)
        if bank is None:
            raise NotFound("문제은행이 존재하지 않습니다")
        return bank

    def list_banks(self, subject: Optional[str], page: int, page_size: int) -> Tuple[List[QuestionBank], int]:
        page, page_size = clamp_page(page, page_size)

        stmt = select(QuestionBank)
        if subject:
            stmt = stmt.where(QuestionBank.subject == subject)

        with reading(self.db):
            total = self.db.scalar(select(func.count()).select_from(stmt.subquery()))
            items = self.db.scalars(
                stmt.order_by(QuestionBank.created_at.desc(), QuestionBank.id.desc())
                .limit(page_size)
                .offset((page - 1) * page_size)
            ).all()
        return list(items), total

    # ==========================================================
    # 문항
    # ==========================================================

    def create_question(self, spec: QuestionCreate, created_by: int) -> Question:
        with reading(self.db):
            bank = self.db.get(QuestionBank, spec.bank_id)
        if bank is None:
            raise NotFound("문제은행이 존재하지 않습니다")
        if spec.score <= 0:
            raise ValidationError("배점은 0보다 커야 합니다")

        question = Question(**spec.model_dump(), created_by=created_by)
        with transaction(self.db):
            self.db.add(question)
        self.db.refresh(question)
        return question

    def get_question(self, question_id: int) -> Question:
        with reading(self.db):
            question = self.db.get(Question, question_id)
        if question is None:
            raise NotFound("문항이 존재하지 않습니다")
        return question

    def list_questions_by_bank(self, bank_id: int, page: int, page_size: int) -> Tuple[List[Question], int]:
        page, page_size = clamp_page(page, page_size)

        with reading(self.db):
            total = self.db.scalar(
                select(func.count(Question.id)).where(Question.bank_id == bank_id)
            )
            items = self.db.scalars(
                select(Question)
                .where(Question.bank_id == bank_id)
                .order_by(Question.created_at.desc(), Question.id.desc())
                .limit(page_size)
                .offset((page - 1) * page_size)
            ).all()
        return list(items), total

    def sample_random(self, subject: Optional[str], difficulty: Optional[str], count: int) -> List[Question]:
        """
        조건에 맞는 문항을 최대 count 개 무작위 순서로 반환한다.
        - subject: 문제은행 과목 기준 (빈 값이면 무관)
        - difficulty: 문항 난이도 (빈 값이면 무관)
        - 조건에 맞는 문항이 count 보다 적으면 있는 만큼만 반환 (오류 아님)
        """
        if count < 1:
            return []

        stmt = select(Question)
        if subject:
            stmt = stmt.join(QuestionBank, Question.bank_id == QuestionBank.id).where(
                QuestionBank.subject == subject
            )
        if difficulty:
            stmt = stmt.where(Question.difficulty == difficulty)

        with reading(self.db):
            questions = self.db.scalars(stmt.order_by(func.random()).limit(count)).all()
        return list(questions)
