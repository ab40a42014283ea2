from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from database.db import Base


class QuestionBank(Base):
    __tablename__ = "question_banks"  # 문제은행 테이블

    id = Column(Integer, primary_key=True, index=True)                 # 문제은행 고유 ID
    name = Column(String(100), nullable=False)                        # 문제은행 이름 (중복 허용)
    description = Column(Text)                                        # 설명
    subject = Column(String(100), nullable=False, index=True)         # 과목 분류 (출제 필터 기준)
    created_by = Column(Integer, nullable=False)                      # 생성자 ID (users 테이블과 연동)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    questions = relationship("Question", back_populates="bank")
