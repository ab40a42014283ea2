from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import TokenData, require_roles
from models.users import STAFF_ROLES
from schemas.common import make_meta
from schemas.question_banks import QuestionBankCreate, QuestionBankOut
from services.base import clamp_page
from services.question_service import QuestionService

router = APIRouter(prefix="/banks", tags=["문제은행"])

staff_only = require_roles(*STAFF_ROLES)


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    return QuestionService(db)


# ✅ [CREATE] 문제은행 생성
@router.post("/")
def create_bank(
    payload: QuestionBankCreate,
    current: TokenData = Depends(staff_only),
    service: QuestionService = Depends(get_question_service),
):
    bank = service.create_bank(payload, current.user_id)
    return {
        "success": True,
        "data": QuestionBankOut.model_validate(bank),
        "message": "문제은행이 생성되었습니다"
    }


# ✅ [READ] 문제은행 목록 (과목 필터 + 페이징)
@router.get("/", dependencies=[Depends(staff_only)])
def list_banks(
    subject: Optional[str] = None,
    page: int = Query(1),
    page_size: int = Query(20),
    service: QuestionService = Depends(get_question_service),
):
    items, total = service.list_banks(subject, page, page_size)
    page, page_size = clamp_page(page, page_size)
    return {
        "success": True,
        "data": [QuestionBankOut.model_validate(b) for b in items],
        "meta": make_meta(total, page, page_size),
        "message": "문제은행 목록 조회 완료"
    }


# ✅ [READ] 문제은행 상세
@router.get("/{bank_id}", dependencies=[Depends(staff_only)])
def read_bank(bank_id: int, service: QuestionService = Depends(get_question_service)):
    bank = service.get_bank(bank_id)
    return {
        "success": True,
        "data": QuestionBankOut.model_validate(bank),
        "message": "문제은행 상세 조회 성공"
    }
