from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import TokenData, get_current_user, require_roles
from models.users import STAFF_ROLES
from schemas.common import make_meta
from schemas.exam_records import ExamRecordDetail, ExamRecordOut, ExamSubmit
from schemas.exams import ExamGenerate, ExamOut, ExamPublic, ExamSummary
from services.attempt_service import AttemptService
from services.base import clamp_page
from services.exam_service import ExamService

router = APIRouter(prefix="/exams", tags=["시험지 생성 및 응시"])


def get_exam_service(db: Session = Depends(get_db)) -> ExamService:
    return ExamService(db)


def get_attempt_service(db: Session = Depends(get_db)) -> AttemptService:
    return AttemptService(db)


# ==========================================================
# [1단계] 정적 라우터
# ==========================================================

# ✅ [GENERATE] 시험지 자동 생성 (문제은행 무작위 추출)
@router.post("/generate")
def generate_exam(
    payload: ExamGenerate,
    current: TokenData = Depends(require_roles(*STAFF_ROLES)),
    service: ExamService = Depends(get_exam_service),
):
    exam = service.generate(payload, current.user_id)
    picked = len(exam.question_links)
    if picked < payload.question_count:
        message = f"문항이 부족하여 요청 {payload.question_count}개 중 {picked}개로 시험지를 생성했습니다"
    else:
        message = "시험지가 성공적으로 생성되었습니다"
    return {
        "success": True,
        "data": ExamOut.model_validate(exam),
        "requested_count": payload.question_count,
        "question_count": picked,
        "message": message
    }


# ✅ [SUBMIT] 답안 제출 + 채점
@router.post("/submit")
def submit_exam(
    payload: ExamSubmit,
    current: TokenData = Depends(get_current_user),
    attempts: AttemptService = Depends(get_attempt_service),
):
    record = attempts.get_record(payload.record_id)
    if record.user_id != current.user_id:
        raise HTTPException(status_code=403, detail="본인의 응시 기록만 제출할 수 있습니다")

    record = attempts.submit(payload.record_id, payload.answers)
    return {
        "success": True,
        "data": ExamRecordDetail.model_validate(record),
        "message": "답안이 제출되어 채점되었습니다"
    }


# ✅ [READ] 시험지 목록
@router.get("/", dependencies=[Depends(get_current_user)])
def list_exams(
    subject: Optional[str] = None,
    page: int = Query(1),
    page_size: int = Query(20),
    service: ExamService = Depends(get_exam_service),
):
    items, total = service.list_exams(subject, page, page_size)
    page, page_size = clamp_page(page, page_size)
    return {
        "success": True,
        "data": [ExamSummary.model_validate(e) for e in items],
        "meta": make_meta(total, page, page_size),
        "message": "시험지 목록 조회 완료"
    }


# ==========================================================
# [2단계] 동적 라우터
# ==========================================================

# ✅ [READ] 시험지 상세 (응시자에게는 정답/해설 숨김)
@router.get("/{exam_id}")
def read_exam(
    exam_id: int,
    current: TokenData = Depends(get_current_user),
    service: ExamService = Depends(get_exam_service),
):
    exam = service.get_exam(exam_id)
    schema = ExamOut if current.role in STAFF_ROLES else ExamPublic
    return {
        "success": True,
        "data": schema.model_validate(exam),
        "message": "시험지 상세 조회 성공"
    }


# ✅ [START] 응시 시작
@router.post("/{exam_id}/start")
def start_exam(
    exam_id: int,
    current: TokenData = Depends(get_current_user),
    attempts: AttemptService = Depends(get_attempt_service),
):
    record = attempts.start(exam_id, current.user_id)
    return {
        "success": True,
        "data": ExamRecordOut.model_validate(record),
        "message": "응시가 시작되었습니다"
    }
