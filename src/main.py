import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from core.config import settings
from core.error_handlers import (
    app_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from core.exceptions import AppException
from core.lifespan import lifespan
from core.middleware import RequestLoggingMiddleware
from router.catalog_router import router as catalog_router
from router.image_router import router as image_router
from router.share_router import router as share_router
from router.storage_router import router as storage_router
from router.upload_router import router as upload_router
from router.video_router import router as video_router
import model.image  # noqa: F401 (테이블 등록)
import model.video  # noqa: F401 (테이블 등록)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="사진 1~3장으로 포옹 이미지/영상을 생성하는 API",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(upload_router)
app.include_router(image_router)
app.include_router(video_router)
app.include_router(catalog_router)
app.include_router(share_router)
app.include_router(storage_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        access_log=False,
    )
