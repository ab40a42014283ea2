from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import TokenData, get_current_user
from models.users import STAFF_ROLES
from schemas.common import make_meta
from schemas.exam_records import ExamRecordDetail, ExamRecordOut
from services.attempt_service import AttemptService
from services.base import clamp_page
from services.stats_service import StatsService

router = APIRouter(prefix="/records", tags=["응시 기록"])


def get_attempt_service(db: Session = Depends(get_db)) -> AttemptService:
    return AttemptService(db)


def get_stats_service(db: Session = Depends(get_db)) -> StatsService:
    return StatsService(db)


# ✅ [READ] 내 응시 기록 목록
@router.get("/")
def list_my_records(
    page: int = Query(1),
    page_size: int = Query(20),
    current: TokenData = Depends(get_current_user),
    attempts: AttemptService = Depends(get_attempt_service),
):
    items, total = attempts.list_records(current.user_id, page, page_size)
    page, page_size = clamp_page(page, page_size)
    return {
        "success": True,
        "data": [ExamRecordOut.model_validate(r) for r in items],
        "meta": make_meta(total, page, page_size),
        "message": "응시 기록 조회 완료"
    }


# ✅ [STATS] 내 응시 통계 (동적 라우터보다 먼저 등록)
@router.get("/stats")
def read_my_stats(
    current: TokenData = Depends(get_current_user),
    stats: StatsService = Depends(get_stats_service),
):
    return {
        "success": True,
        "data": stats.stats(current.user_id),
        "message": "응시 통계 조회 성공"
    }


# ✅ [READ] 응시 기록 상세 (본인 또는 관리자)
@router.get("/{record_id}")
def read_record(
    record_id: int,
    current: TokenData = Depends(get_current_user),
    attempts: AttemptService = Depends(get_attempt_service),
):
    record = attempts.get_record(record_id)
    if record.user_id != current.user_id and current.role not in STAFF_ROLES:
        raise HTTPException(status_code=403, detail="본인의 응시 기록만 조회할 수 있습니다")
    return {
        "success": True,
        "data": ExamRecordDetail.model_validate(record),
        "message": "응시 기록 상세 조회 성공"
    }
