from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import TokenData, require_roles
from models.users import STAFF_ROLES
from schemas.common import make_meta
from schemas.questions import QuestionCreate, QuestionOut
from services.base import clamp_page
from services.question_service import QuestionService

router = APIRouter(prefix="/questions", tags=["문항"])

staff_only = require_roles(*STAFF_ROLES)


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    return QuestionService(db)


# ✅ [CREATE] 문항 추가
@router.post("/")
def create_question(
    payload: QuestionCreate,
    current: TokenData = Depends(staff_only),
    service: QuestionService = Depends(get_question_service),
):
    question = service.create_question(payload, current.user_id)
    return {
        "success": True,
        "data": QuestionOut.model_validate(question),
        "message": "문항이 추가되었습니다"
    }


# ✅ [READ] 문제은행별 문항 목록
@router.get("/bank/{bank_id}", dependencies=[Depends(staff_only)])
def list_questions_by_bank(
    bank_id: int,
    page: int = Query(1),
    page_size: int = Query(20),
    service: QuestionService = Depends(get_question_service),
):
    items, total = service.list_questions_by_bank(bank_id, page, page_size)
    page, page_size = clamp_page(page, page_size)
    return {
        "success": True,
        "data": [QuestionOut.model_validate(q) for q in items],
        "meta": make_meta(total, page, page_size),
        "message": "문항 목록 조회 완료"
    }


# ✅ [READ] 문항 상세
@router.get("/{question_id}", dependencies=[Depends(staff_only)])
def read_question(question_id: int, service: QuestionService = Depends(get_question_service)):
    question = service.get_question(question_id)
    return {
        "success": True,
        "data": QuestionOut.model_validate(question),
        "message": "문항 상세 조회 성공"
    }
