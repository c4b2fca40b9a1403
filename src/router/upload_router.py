from fastapi import APIRouter, Depends, File, Form, UploadFile

from core.config import Settings
from core.dependencies import get_settings, get_storage
from service import upload_service
from storage.base import ObjectStorage

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload")
def upload_image(
    file: UploadFile | None = File(default=None),
    image_number: str | None = Form(default=None, alias="imageNumber"),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """이미지 슬롯(image1~3) 업로드 → 스토리지 핸들 반환."""
    url = upload_service.save_upload(file, image_number, storage, settings)
    return {"url": url}
