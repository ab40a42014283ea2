from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


# ✅ 문항별 제출 답안
class ExamAnswerSubmit(BaseModel):
    question_id: int
    user_answer: str                              # 가공 없이 그대로 비교


# ✅ 답안 제출 입력
class ExamSubmit(BaseModel):
    record_id: int
    answers: List[ExamAnswerSubmit] = Field(default_factory=list)


# ✅ 채점 결과 (문항별)
class ExamAnswerOut(BaseModel):
    id: int
    record_id: int
    question_id: int
    user_answer: str
    score: float
    is_correct: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 응시 기록 요약
class ExamRecordOut(BaseModel):
    id: int
    exam_id: int
    user_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    total_score: Optional[float] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 응시 기록 상세 (답안 포함)
class ExamRecordDetail(ExamRecordOut):
    answers: List[ExamAnswerOut] = []


# ✅ 최근 응시 항목
class RecentAttempt(BaseModel):
    id: int
    exam_id: int
    total_score: Optional[float] = None
    start_time: datetime
    status: str

    model_config = ConfigDict(from_attributes=True)


# ✅ 개인 응시 통계 (채점 완료 기록 기준)
class ExamStats(BaseModel):
    count: int = 0
    total_score: float = 0.0
    avg_score: float = 0.0
    max_score: float = 0.0
    min_score: float = 0.0
    recent_attempts: List[RecentAttempt] = []
