from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database.db import Base
from models.questions import Question  # noqa: F401  relationship 대상 등록

EXAM_DRAFT = "draft"
EXAM_PUBLISHED = "published"


class Exam(Base):
    __tablename__ = "exams"  # 시험지 테이블

    id = Column(Integer, primary_key=True, index=True)          # 시험지 고유 ID
    title = Column(String(200), nullable=False)                # 시험지 제목
    description = Column(Text)                                 # 설명
    subject = Column(String(100), nullable=False, index=True)  # 과목
    total_score = Column(Float, nullable=False, default=0)     # 생성 시점 총점 (캐시 값, 이후 재계산 안 함)
    duration = Column(Integer, nullable=False)                 # 시험 시간 (분, 안내용)
    start_time = Column(DateTime, nullable=False)              # 응시 가능 시작 시각
    end_time = Column(DateTime, nullable=False)                # 응시 가능 종료 시각
    status = Column(String(20), nullable=False, default=EXAM_DRAFT)  # draft / published
    created_by = Column(Integer, nullable=False)               # 출제자 ID
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    question_links = relationship(
        "ExamQuestion",
        back_populates="exam",
        order_by="ExamQuestion.sequence",
        cascade="all, delete-orphan",
    )

    @property
    def questions(self):
        """출제 순서(sequence)대로 정렬된 문항 목록"""
        return [link.question for link in self.question_links]


class ExamQuestion(Base):
    __tablename__ = "exam_questions"  # 시험지-문항 연결 테이블 (출제 순서 포함)

    exam_id = Column(Integer, ForeignKey("exams.id"), primary_key=True)          # 시험지 ID
    question_id = Column(Integer, ForeignKey("questions.id"), primary_key=True)  # 문항 ID
    sequence = Column(Integer, nullable=False)                                   # 1부터 시작하는 출제 순서

    exam = relationship("Exam", back_populates="question_links")
    question = relationship("Question")
