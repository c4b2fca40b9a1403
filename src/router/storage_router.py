from fastapi import APIRouter, Depends, Response

from core.config import Settings
from core.dependencies import get_settings, get_storage
from core.exceptions import InvalidSignature
from core.security import verify_signed_token
from storage.base import ObjectStorage

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/{bucket}/{name}")
def get_object(
    bucket: str,
    name: str,
    token: str = "",
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """서명 URL 역참조. 토큰이 이 bucket/name에 대해 유효할 때만 내려준다."""
    if not token or not verify_signed_token(token, bucket, name, settings):
        raise InvalidSignature
    obj = storage.get(bucket, name)
    return Response(
        content=obj.data,
        media_type=obj.content_type or "application/octet-stream",
        headers={"Cache-Control": "private, max-age=3600"},
    )
