import time

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

SLOW_THRESHOLD_MS = 500

# 폴링 요청이 5초마다 들어오므로 저장소 서빙 경로는 DEBUG로만 남긴다
QUIET_PREFIXES = ("/storage/", "/health")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 HTTP 요청을 로깅하는 미들웨어.

    기록 항목: 메서드, 경로, 클라이언트 IP, 상태코드, 처리시간(ms)
    처리시간이 500ms를 초과하면 WARNING, 5xx 응답은 ERROR로 기록.
    생성 API는 외부 모델 호출 때문에 대부분 slow로 찍히는 게 정상이다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start) * 1000
        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path
        status = response.status_code
        line = f"{request.method} {path} | {client_ip} | {status} | {elapsed_ms:.0f}ms"

        if status >= 500:
            logger.error(line)
        elif elapsed_ms > SLOW_THRESHOLD_MS:
            logger.warning(f"{line} (slow)")
        elif path.startswith(QUIET_PREFIXES):
            logger.debug(line)
        else:
            logger.info(line)

        return response
