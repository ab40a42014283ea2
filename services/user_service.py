"""
services/user_service.py

사용자 디렉터리
- 회원가입 / 로그인 인증 / 조회 / 내 정보 수정
- 관리자 계정 생성은 provision_admin 으로만 수행 (scripts/create_admin.py)
  로그인 실패 시 계정을 만들거나 비밀번호를 바꾸는 동작은 하지 않음
"""

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.users import User, ROLE_ADMIN, ROLE_EMPLOYEE
from schemas.users import UserRegister, UserUpdate
from services.base import reading, transaction
from services.errors import AuthError, NotFound, ValidationError

logger = logging.getLogger(__name__)

# bcrypt 입력 한계 (바이트)
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], password_hash.encode("utf-8"))
    except ValueError:
        # 저장된 해시 형식이 깨진 경우
        return False


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str):
        with reading(self.db):
            return self.db.scalar(select(User).where(User.username == username))

    def get_user(self, user_id: int) -> User:
        with reading(self.db):
            user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("사용자가 존재하지 않습니다")
        return user

    def register(self, spec: UserRegister, role: str = ROLE_EMPLOYEE) -> User:
        if self.get_by_username(spec.username) is not None:
            raise ValidationError("이미 사용 중인 아이디입니다")

        user = User(
            username=spec.username,
            password_hash=hash_password(spec.password),
            name=spec.name,
            phone=spec.phone,
            department=spec.department,
            job_title=spec.job_title,
            role=role,
            status=1,
        )
        with transaction(self.db):
            self.db.add(user)
            try:
                self.db.flush()
            except IntegrityError as exc:
                raise ValidationError("이미 사용 중인 아이디입니다") from exc

        self.db.refresh(user)
        logger.info(f"회원가입: user_id={user.id}, username={user.username}, role={user.role}")
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError()
        if user.status == 0:
            raise AuthError("비활성화된 계정입니다")
        return user

    def update_profile(self, user_id: int, spec: UserUpdate) -> User:
        user = self.get_user(user_id)
        with transaction(self.db):
            for key, value in spec.model_dump(exclude_none=True).items():
                setattr(user, key, value)
        self.db.refresh(user)
        return user

    def provision_admin(self, username: str, password: str, name: str = "시스템 관리자") -> User:
        """
        관리자 계정 1회 생성.
        이미 같은 아이디가 있으면 아무것도 바꾸지 않고 ValidationError.
        """
        if not password:
            raise ValidationError("관리자 비밀번호가 지정되지 않았습니다")
        if self.get_by_username(username) is not None:
            raise ValidationError(f"이미 존재하는 계정입니다: {username}")

        user = self.register(UserRegister(username=username, password=password, name=name), role=ROLE_ADMIN)
        logger.warning(f"관리자 계정 생성: user_id={user.id}, username={username}")
        return user
