"""
관리자 계정 1회 생성 스크립트

    ADMIN_USERNAME=admin ADMIN_PASSWORD='...' python -m scripts.create_admin

이미 계정이 있으면 아무것도 바꾸지 않고 종료한다.
"""
import sys

from config.settings import settings
from database.db import SessionLocal
from services.errors import ValidationError
from services.user_service import UserService


def create_admin() -> int:
    db = SessionLocal()
    try:
        user = UserService(db).provision_admin(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    except ValidationError as e:
        print(f"⚠️ 관리자 계정 생성 중단: {e.message}")
        return 1
    finally:
        db.close()

    print(f"✅ 관리자 계정 생성 완료: id={user.id}, username={user.username}")
    return 0


if __name__ == "__main__":
    sys.exit(create_admin())
