import base64
import os
import time
from concurrent.futures import ThreadPoolExecutor

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.config import Settings
from core.exceptions import ObjectNotFound, StorageError, ValidationError
from model.image import ImageJob
from model.status import JobStatus
from provider.gemini import MAX_REFERENCE_IMAGES, GeminiImageProvider, InlineImage
from service.prompt_service import DEFAULT_IMAGE_PROMPT, resolve_prompt
from storage.base import ObjectStorage, StoredObject, object_name_from_url

MIME_BY_EXTENSION = {"png": "image/png", "webp": "image/webp"}


def infer_mime_type(obj: StoredObject) -> str:
    """저장된 content_type → 확장자 → image/jpeg 순으로 MIME 타입을 정한다."""
    if obj.content_type and obj.content_type != "application/octet-stream":
        return obj.content_type
    ext = os.path.splitext(obj.name)[1].lstrip(".").lower()
    return MIME_BY_EXTENSION.get(ext, "image/jpeg")


def _validate_image_urls(image_urls: list[str] | None) -> list[str]:
    if image_urls and len(image_urls) > MAX_REFERENCE_IMAGES:
        raise ValidationError(
            f"Maximum {MAX_REFERENCE_IMAGES} images allowed (Gemini limitation)"
        )
    urls = [u for u in (image_urls or []) if u]
    if not urls:
        raise ValidationError("At least one image is required")
    return urls


def load_reference_images(
    image_urls: list[str], storage: ObjectStorage, settings: Settings
) -> list[InlineImage]:
    """참조 이미지를 스토리지에서 (공개 URL이 아니라 인증된 읽기로) 동시에 가져온다.

    순서는 입력 순서를 유지한다.
    """

    def fetch_one(url: str) -> InlineImage:
        name = object_name_from_url(url)
        try:
            obj = storage.get(settings.IMAGE_BUCKET, name)
        except ObjectNotFound as e:
            raise StorageError(e.message)
        mime_type = infer_mime_type(obj)
        encoded = base64.b64encode(obj.data).decode("ascii")
        logger.debug(f"Reference {name}: {mime_type}, {len(obj.data)} bytes")
        return InlineImage(mime_type=mime_type, data=encoded)

    workers = max(1, min(len(image_urls), settings.REFERENCE_FETCH_WORKERS))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(fetch_one, image_urls))


def create_image(
    image_urls: list[str] | None,
    prompt: str | None,
    session: Session,
    storage: ObjectStorage,
    provider: GeminiImageProvider,
    settings: Settings,
) -> tuple[ImageJob, str]:
    """참조 이미지 1~3장으로 포옹 이미지를 생성한다.

    1. 개수 검증 (0장 / 4장 이상 → ValidationError, 네트워크 호출 없음)
    2. API 키 확인 (없으면 ConfigurationError)
    3. 참조 이미지 동시 로드 + base64
    4. Gemini 호출 → PNG 저장 → 7일 서명 URL
    5. completed 레코드 삽입

    Returns:
        (삽입된 레코드, 서명 URL)
    """
    urls = _validate_image_urls(image_urls)
    provider.ensure_configured()
    final_prompt = resolve_prompt(prompt, DEFAULT_IMAGE_PROMPT)

    logger.info(f"Generating image with {provider.tag} from {len(urls)} reference image(s)")
    images = load_reference_images(urls, storage, settings)
    image_bytes = provider.generate_image(final_prompt, images)

    stamp = int(time.time() * 1000)
    filename = f"{provider.tag}_{stamp}_hug-image.png"
    handle = storage.put(settings.IMAGE_BUCKET, filename, image_bytes, "image/png")
    signed_url = storage.create_signed_url(settings.IMAGE_BUCKET, filename)

    record = ImageJob(
        provider=provider.tag,
        prompt=final_prompt,
        image1_url=urls[0],
        image2_url=urls[1] if len(urls) > 1 else None,
        image3_url=urls[2] if len(urls) > 2 else None,
        status=JobStatus.COMPLETED,
        image_url=handle,
        generation_id=f"{provider.tag}_{stamp}",
    )
    try:
        session.add(record)
        session.commit()
        session.refresh(record)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to insert image record: {e}")
        raise StorageError("Failed to save image record to database")

    logger.info(f"Image job {record.id} completed ({filename})")
    return record, signed_url
