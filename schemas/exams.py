from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from schemas.questions import QuestionOut, QuestionPublic


# ✅ 시험지 자동 생성 입력
# start_time / end_time 은 "YYYY-MM-DD HH:MM:SS" 문자열 (서비스에서 파싱)
class ExamGenerate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    subject: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0)               # 분
    start_time: str
    end_time: str
    question_count: int = Field(..., ge=1)
    difficulty: str = ""                           # 빈 값이면 난이도 무관


# ✅ 목록용 요약 출력
class ExamSummary(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    subject: str
    total_score: float
    duration: int
    start_time: datetime
    end_time: datetime
    status: str
    created_by: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 응시자용 상세 (정답 숨김)
class ExamPublic(ExamSummary):
    questions: List[QuestionPublic] = []


# ✅ 관리자용 상세
class ExamOut(ExamSummary):
    questions: List[QuestionOut] = []
