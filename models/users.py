from sqlalchemy import Column, Integer, String, DateTime, func
from database.db import Base

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_EMPLOYEE = "employee"

# 문제은행/출제 권한을 가진 역할
STAFF_ROLES = (ROLE_ADMIN, ROLE_MANAGER)


class User(Base):
    __tablename__ = "users"  # 사용자 계정 테이블

    id = Column(Integer, primary_key=True, index=True)                     # 사용자 고유 ID
    username = Column(String(50), nullable=False, unique=True, index=True)  # 로그인 아이디
    password_hash = Column(String(255), nullable=False)                   # bcrypt 해시
    name = Column(String(50))                                             # 이름
    gender = Column(String(10))                                           # 성별
    email = Column(String(100))                                           # 이메일
    role = Column(String(20), nullable=False, default=ROLE_EMPLOYEE)      # admin / manager / employee
    phone = Column(String(20))                                            # 연락처
    department = Column(String(100))                                      # 소속 부서
    job_title = Column(String(100))                                       # 직함
    status = Column(Integer, nullable=False, default=1)                   # 1: 활성, 0: 비활성
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
