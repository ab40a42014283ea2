from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# ✅ 입력용
class QuestionCreate(BaseModel):
    bank_id: int                                   # 소속 문제은행 ID
    type: str = Field(..., min_length=1)           # 문항 유형
    content: str = Field(..., min_length=1)        # 문제 내용
    options: str = ""                              # 보기 (직렬화 문자열, 예: JSON)
    answer: str = Field(..., min_length=1)         # 정답 (완전 일치 비교)
    score: float = Field(..., gt=0)                # 배점
    difficulty: str = ""                           # 난이도
    analysis: Optional[str] = None                 # 해설


# ✅ 응시자에게 보여주는 문항 (정답/해설 제외)
class QuestionPublic(BaseModel):
    id: int
    bank_id: int
    type: str
    content: str
    options: str
    score: float
    difficulty: str

    model_config = ConfigDict(from_attributes=True)


# ✅ 관리자용 전체 출력
class QuestionOut(QuestionPublic):
    answer: str
    analysis: Optional[str] = None
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
