from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import Session

from core.config import Settings
from core.dependencies import get_image_provider, get_settings, get_storage
from model.database import get_session
from provider.gemini import GeminiImageProvider
from service import gallery_service, image_service
from storage.base import ObjectStorage

router = APIRouter(prefix="/api", tags=["images"])


# --- 요청 스키마 ---

class CreateImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_urls: list[str] | None = Field(default=None, alias="imageUrls")
    prompt: str | None = None


# --- 엔드포인트 ---

@router.post("/create-image")
def create_image(
    req: CreateImageRequest,
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    provider: GeminiImageProvider = Depends(get_image_provider),
    settings: Settings = Depends(get_settings),
):
    record, image_url = image_service.create_image(
        req.image_urls, req.prompt, session, storage, provider, settings
    )
    return {
        "success": True,
        "imageUrl": image_url,
        "recordId": record.id,
        "message": "Image generated successfully with Gemini Nano Banana!",
    }


@router.get("/list-images")
def list_images(
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """최근 50개, 최신순. image_url은 매번 새로 서명된다."""
    return {
        "success": True,
        "images": gallery_service.list_images(session, storage, settings),
    }
