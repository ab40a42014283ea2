from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# ✅ 입력용
class QuestionBankCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)   # 문제은행 이름
    description: Optional[str] = None                      # 설명
    subject: str = Field(..., min_length=1, max_length=100)  # 과목 분류


# ✅ 출력용
class QuestionBankOut(QuestionBankCreate):
    id: int
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
