"""
services/errors.py

- 서비스 계층에서 발생하는 오류를 종류(ErrorKind)와 사람이 읽는 메시지로 분리해 표현합니다.
- 라우터/에러 핸들러는 kind 로만 HTTP 상태를 결정하고, message 는 그대로 내려줍니다.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    WINDOW_ERROR = "WINDOW_ERROR"
    DUPLICATE_ATTEMPT = "DUPLICATE_ATTEMPT"
    STORE_ERROR = "STORE_ERROR"
    AUTH_ERROR = "AUTH_ERROR"


class ExamError(Exception):
    """서비스 오류 공통 부모"""

    kind = ErrorKind.STORE_ERROR
    default_message = "요청을 처리할 수 없습니다"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(kind={self.kind.value}, message={self.message!r})>"


class ValidationError(ExamError):
    kind = ErrorKind.VALIDATION_ERROR
    default_message = "입력값이 올바르지 않습니다"


class NotFound(ExamError):
    kind = ErrorKind.NOT_FOUND
    default_message = "대상을 찾을 수 없습니다"


class InvalidState(ExamError):
    kind = ErrorKind.INVALID_STATE
    default_message = "현재 상태에서 허용되지 않는 요청입니다"


class WindowError(ExamError):
    kind = ErrorKind.WINDOW_ERROR
    default_message = "응시 가능 시간이 아닙니다"


class DuplicateAttempt(ExamError):
    kind = ErrorKind.DUPLICATE_ATTEMPT
    default_message = "이미 응시한 시험입니다"


class StoreError(ExamError):
    kind = ErrorKind.STORE_ERROR
    default_message = "데이터 저장소 오류가 발생했습니다"


class AuthError(ExamError):
    kind = ErrorKind.AUTH_ERROR
    default_message = "아이디 또는 비밀번호가 올바르지 않습니다"
