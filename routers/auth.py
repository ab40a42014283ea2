from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import TokenData, create_access_token, get_current_user
from schemas.users import LoginOut, UserLogin, UserOut, UserRegister, UserUpdate
from services.user_service import UserService

router = APIRouter(tags=["인증/사용자"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


# ✅ [REGISTER] 회원가입
@router.post("/register")
def register(payload: UserRegister, users: UserService = Depends(get_user_service)):
    user = users.register(payload)
    return {
        "success": True,
        "data": UserOut.model_validate(user),
        "message": "회원가입이 완료되었습니다"
    }


# ✅ [LOGIN] 로그인 → JWT 발급
@router.post("/login")
def login(payload: UserLogin, users: UserService = Depends(get_user_service)):
    user = users.authenticate(payload.username, payload.password)
    token = create_access_token(user.id, user.username, user.role)
    return {
        "success": True,
        "data": LoginOut(user=UserOut.model_validate(user), token=token),
        "message": "로그인 성공"
    }


# ✅ [READ] 내 정보
@router.get("/user/me")
def read_me(current: TokenData = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    user = users.get_user(current.user_id)
    return {
        "success": True,
        "data": UserOut.model_validate(user),
        "message": "사용자 정보 조회 성공"
    }


# ✅ [UPDATE] 내 정보 수정
@router.put("/user/me")
def update_me(
    payload: UserUpdate,
    current: TokenData = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = users.update_profile(current.user_id, payload)
    return {
        "success": True,
        "data": UserOut.model_validate(user),
        "message": "사용자 정보가 수정되었습니다"
    }
