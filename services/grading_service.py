import logging
from typing import Iterable

from sqlalchemy.orm import Session

from models.exam_records import ExamAnswer, ExamRecord
from models.questions import Question
from schemas.exam_records import ExamAnswerSubmit
from services.errors import NotFound

logger = logging.getLogger(__name__)


class GradingService:
    """
    제출 답안 채점기
    - 정답 비교는 문자열 완전 일치 (대소문자 구분, 공백 처리 없음, 부분 점수 없음)
    - 제출하지 않은 문항은 답안 행을 만들지 않고 0점 처리
    - 커밋하지 않는다: 호출자(AttemptService.submit)의 트랜잭션에 포함됨
    """

    def __init__(self, db: Session):
        self.db = db

    def grade(self, record: ExamRecord, answers: Iterable[ExamAnswerSubmit]) -> float:
        total_score = 0.0
        for submitted in answers:
            question = self.db.get(Question, submitted.question_id)
            if question is None:
                raise NotFound(f"문항이 존재하지 않습니다 (question_id={submitted.question_id})")

            is_correct = submitted.user_answer == question.answer
            score = question.score if is_correct else 0.0
            total_score += score

            record.answers.append(
                ExamAnswer(
                    question_id=question.id,
                    user_answer=submitted.user_answer,
                    score=score,
                    is_correct=is_correct,
                )
            )

        logger.debug(f"채점 완료: record_id={record.id}, total_score={total_score}")
        return total_score
