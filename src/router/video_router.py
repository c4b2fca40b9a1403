from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import Session

from core.config import Settings
from core.dependencies import get_settings, get_storage, get_video_provider
from model.database import get_session
from provider.sora import OpenAIVideoProvider
from service import archive_service, gallery_service, video_service
from storage.base import ObjectStorage

router = APIRouter(prefix="/api", tags=["videos"])


# --- 요청 스키마 ---

class CreateVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image1_url: str | None = Field(default=None, alias="image1Url")
    image2_url: str | None = Field(default=None, alias="image2Url")
    prompt: str | None = None


class CheckVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: str | None = Field(default=None, alias="videoId")
    record_id: int | None = Field(default=None, alias="recordId")


class ArchiveVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_url: str | None = Field(default=None, alias="videoUrl")
    video_id: str | None = Field(default=None, alias="videoId")
    record_id: int | None = Field(default=None, alias="recordId")


# --- 엔드포인트 ---

@router.post("/create-video")
def create_video(
    req: CreateVideoRequest,
    session: Session = Depends(get_session),
    provider: OpenAIVideoProvider = Depends(get_video_provider),
):
    result = video_service.create_video(
        req.image1_url, req.image2_url, req.prompt, session, provider
    )
    return {
        "success": True,
        **result,
        "message": "Video generation started. This may take several minutes.",
    }


@router.post("/check-video")
def check_video(
    req: CheckVideoRequest,
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    provider: OpenAIVideoProvider = Depends(get_video_provider),
    settings: Settings = Depends(get_settings),
):
    """클라이언트가 5초 간격(최대 120회)으로 호출하는 상태 확인."""
    result = video_service.check_video(
        req.video_id, req.record_id, session, storage, provider, settings
    )
    return {"success": True, **result}


@router.post("/download-and-store-video")
def download_and_store_video(
    req: ArchiveVideoRequest,
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    provider: OpenAIVideoProvider = Depends(get_video_provider),
    settings: Settings = Depends(get_settings),
):
    result = archive_service.archive_video(
        req.video_url, req.video_id, req.record_id, session, storage, provider, settings
    )
    return {
        "success": True,
        "supabaseUrl": result.signed_url,
        "originalUrl": result.source_url,
        "message": "Video stored successfully",
    }


@router.get("/list-videos")
def list_videos(
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return {
        "success": True,
        "videos": gallery_service.list_videos(session, storage, settings),
    }
