from sqlalchemy import (
    Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from database.db import Base
from models.exams import Exam  # noqa: F401  relationship 대상 등록

RECORD_ONGOING = "ongoing"
RECORD_SUBMITTED = "submitted"
RECORD_GRADED = "graded"


class ExamRecord(Base):
    __tablename__ = "exam_records"  # 응시 기록 테이블
    __table_args__ = (
        # 시험당 1인 1회 응시 (동시 start 요청 경쟁 조건의 최종 방어선)
        UniqueConstraint("exam_id", "user_id", name="uq_exam_records_exam_user"),
    )

    id = Column(Integer, primary_key=True, index=True)                          # 응시 기록 고유 ID
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)  # 시험지 ID
    user_id = Column(Integer, nullable=False, index=True)                       # 응시자 ID
    start_time = Column(DateTime, nullable=False)                              # 응시 시작 시각
    end_time = Column(DateTime)                                                # 제출 시각 (제출 전 NULL)
    duration = Column(Integer)                                                 # 소요 시간 (초)
    total_score = Column(Float)                                                # 총점 (채점 전 NULL)
    status = Column(String(20), nullable=False, default=RECORD_ONGOING)        # ongoing / submitted / graded
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    exam = relationship("Exam")
    answers = relationship(
        "ExamAnswer",
        back_populates="record",
        order_by="ExamAnswer.id",
        cascade="all, delete-orphan",
    )


class ExamAnswer(Base):
    __tablename__ = "exam_answers"  # 문항별 답안/채점 결과 테이블

    id = Column(Integer, primary_key=True, index=True)                               # 답안 고유 ID
    record_id = Column(Integer, ForeignKey("exam_records.id"), nullable=False, index=True)  # 응시 기록 ID
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)        # 문항 ID
    user_answer = Column(Text, nullable=False)                                       # 제출 답안
    score = Column(Float, nullable=False, default=0)                                 # 획득 점수
    is_correct = Column(Boolean, nullable=False, default=False)                      # 정답 여부
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    record = relationship("ExamRecord", back_populates="answers")
