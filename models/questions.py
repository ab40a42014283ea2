from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database.db import Base
from models.question_banks import QuestionBank  # noqa: F401  relationship 대상 등록


class Question(Base):
    __tablename__ = "questions"  # 문항 테이블
    __table_args__ = (
        CheckConstraint("score > 0", name="ck_questions_score_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)                                   # 문항 고유 ID
    bank_id = Column(Integer, ForeignKey("question_banks.id"), nullable=False, index=True)  # 소속 문제은행 ID
    type = Column(String(20), nullable=False)                                           # single / multiple / judge 등
    content = Column(Text, nullable=False)                                              # 문제 내용
    options = Column(Text, nullable=False, default="")                                  # 보기 (직렬화 문자열)
    answer = Column(String(255), nullable=False)                                        # 정답 (완전 일치 비교 대상)
    score = Column(Float, nullable=False)                                               # 배점 (> 0)
    difficulty = Column(String(20), nullable=False, default="", index=True)             # 난이도 태그
    analysis = Column(Text)                                                             # 해설
    created_by = Column(Integer, nullable=False)                                        # 작성자 ID
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    bank = relationship("QuestionBank", back_populates="questions")
