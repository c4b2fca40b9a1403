import io
import os
import re
import time
import uuid

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from core.config import Settings
from core.exceptions import ValidationError
from storage.base import ObjectStorage

GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}
EXTENSION_BY_TYPE = {"image/png": ".png", "image/webp": ".webp", "image/jpeg": ".jpg"}


def sniff_content_type(data: bytes) -> str | None:
    """Pillow로 이미지 포맷을 읽어 MIME 타입을 돌려준다. 이미지가 아니면 None."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def _slot_label(slot: str | None) -> str:
    label = re.sub(r"[^A-Za-z0-9-]", "", slot or "")
    return label or "upload"


def save_upload(
    file: UploadFile | None,
    slot: str | None,
    storage: ObjectStorage,
    settings: Settings,
) -> str:
    """업로드 파일을 이미지 버킷에 저장하고 핸들을 반환한다.

    이름: {slot}_{ms}_{uuid}{ext}. 같은 슬롯에 동시에 올려도 충돌하지 않는다.
    """
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    data = file.file.read()
    if not data:
        raise ValidationError("Uploaded file is empty")

    content_type = (file.content_type or "").lower()
    if content_type in GENERIC_CONTENT_TYPES:
        content_type = sniff_content_type(data) or "image/jpeg"

    ext = os.path.splitext(file.filename)[1].lower()
    if not re.fullmatch(r"\.[a-z0-9]{1,5}", ext):
        ext = EXTENSION_BY_TYPE.get(content_type, ".jpg")

    name = f"{_slot_label(slot)}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}{ext}"
    return storage.put(settings.IMAGE_BUCKET, name, data, content_type)
