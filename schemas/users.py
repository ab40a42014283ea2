from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# ✅ 회원가입 입력
class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)   # 로그인 아이디
    password: str = Field(..., min_length=1)                 # 비밀번호 (정책 검사는 범위 밖)
    name: Optional[str] = None                               # 이름
    phone: Optional[str] = None                              # 연락처
    department: Optional[str] = None                         # 부서
    job_title: Optional[str] = None                          # 직함


# ✅ 로그인 입력
class UserLogin(BaseModel):
    username: str
    password: str


# ✅ 내 정보 수정 (None 인 필드는 유지)
class UserUpdate(BaseModel):
    name: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None


# ✅ 출력용 (비밀번호 해시 제외)
class UserOut(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    role: str
    phone: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    status: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 로그인 응답
class LoginOut(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
