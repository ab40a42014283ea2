import logging
from contextlib import contextmanager
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import settings
from services.errors import StoreError

logger = logging.getLogger(__name__)


def clamp_page(page: int, page_size: int) -> Tuple[int, int]:
    """page < 1 → 1, page_size 가 [1, MAX] 밖이면 기본값으로 보정"""
    if page is None or page < 1:
        page = 1
    if page_size is None or page_size < 1 or page_size > settings.MAX_PAGE_SIZE:
        page_size = settings.DEFAULT_PAGE_SIZE
    return page, page_size


@contextmanager
def transaction(db: Session):
    """
    하나의 작업 단위를 커밋하거나 전부 롤백한다.
    - 서비스 오류(ExamError)는 롤백 후 그대로 전파
    - SQLAlchemy 오류는 롤백 후 StoreError 로 감싸서 전파 (쿼리 내용은 로그에만 남김)
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("트랜잭션 실패, 롤백합니다")
        raise StoreError() from exc
    except Exception:
        db.rollback()
        raise


@contextmanager
def reading(db: Session):
    """
    조회 전용 구간. 커밋하지 않는다.
    - SQLAlchemy 오류는 StoreError 로 감싸서 전파 (transaction 과 같은 응답 형식)
    """
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("조회 실패, 롤백합니다")
        raise StoreError() from exc
