import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.common import ErrorDetail, ErrorResponse
from services.errors import ErrorKind, ExamError

logger = logging.getLogger(__name__)

# ✅ 오류 종류 → HTTP 상태 코드
STATUS_BY_KIND = {
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.WINDOW_ERROR: 403,
    ErrorKind.DUPLICATE_ATTEMPT: 409,
    ErrorKind.STORE_ERROR: 500,
    ErrorKind.AUTH_ERROR: 401,
}

HTTP_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _error(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
        headers=headers,
    )


def add_error_handlers(app: FastAPI):
    @app.exception_handler(ExamError)
    async def exam_error_handler(request: Request, exc: ExamError):
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        if exc.kind == ErrorKind.STORE_ERROR:
            # 원인(쿼리 등)은 로그에만 남기고 응답은 일반 메시지
            logger.error(f"저장소 오류: {request.method} {request.url.path}", exc_info=exc.__cause__ or exc)
        return _error(status_code, exc.kind.value, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        return _error(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", []) if p != "body")
        message = f"{loc}: {first.get('msg', '잘못된 요청입니다')}" if loc else first.get("msg", "잘못된 요청입니다")
        return _error(422, ErrorKind.VALIDATION_ERROR.value, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 오류: {request.method} {request.url.path}")
        return _error(500, "INTERNAL_ERROR", "서버 내부 오류가 발생했습니다")
