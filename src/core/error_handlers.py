"""전역 예외 핸들러.

AppException 계열 예외와 FastAPI의 요청 검증 예외를 잡아
일관된 {"success": false, "error": "..."} JSON 응답으로 변환한다.
main.py에서 app.add_exception_handler()로 등록한다.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import AppException


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} | {exc.error_code} | {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message,
        },
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """본문 파싱 실패(422)를 400 형식으로 맞춘다."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = first.get("msg", "Invalid request body")
    message = f"{location}: {detail}" if location else detail
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상 못 한 예외도 같은 형식으로 돌려준다. 트레이스백은 로그에만 남긴다."""
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "Internal server error"},
    )
