from datetime import UTC, datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.config import Settings
from core.exceptions import DownloadError, StorageError, ValidationError
from model.status import JobStatus, advance_status
from model.video import VideoJob
from provider.sora import OpenAIVideoProvider, describe
from service.archive_service import archive_video
from service.prompt_service import DEFAULT_VIDEO_PROMPT, resolve_prompt
from storage.base import ObjectStorage, object_name_from_url


def create_video(
    image1_url: str | None,
    image2_url: str | None,
    prompt: str | None,
    session: Session,
    provider: OpenAIVideoProvider,
) -> dict:
    """Sora 작업을 만들고 processing 레코드를 남긴다.

    레코드 삽입이 실패해도 작업 ID는 돌려준다 (클라이언트가 폴링은 할 수 있도록).
    """
    if not image1_url or not image2_url:
        raise ValidationError("Both images are required")

    final_prompt = resolve_prompt(prompt, DEFAULT_VIDEO_PROMPT)
    logger.info(f"Creating video with {provider.tag}: {final_prompt[:80]}")
    video = provider.create_video(final_prompt)

    video_id = video.get("id")
    status = video.get("status") or JobStatus.PROCESSING

    record_id = None
    try:
        record = VideoJob(
            prompt=final_prompt,
            image1_url=image1_url,
            image2_url=image2_url,
            status=status,
            video_id=video_id,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        record_id = record.id
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to insert video record for {video_id}: {e}")

    return {
        "videoId": video_id,
        "recordId": record_id,
        "status": status,
    }


def _resign_existing(record: VideoJob, storage: ObjectStorage, settings: Settings) -> str:
    try:
        return storage.create_signed_url(
            settings.VIDEO_BUCKET, object_name_from_url(record.video_url)
        )
    except StorageError as e:
        logger.error(f"Failed to re-sign video {record.id}: {e}")
        return record.video_url


def _update_record(
    session: Session,
    record: VideoJob,
    observed_status: str | None,
    result_url: str | None,
    storage: ObjectStorage,
) -> None:
    """상태를 단조롭게 갱신한다. 실패해도 응답은 성공으로 둔다."""
    try:
        session.refresh(record)
        record.status = advance_status(record.status, observed_status)
        # 스토리지 핸들은 Sora URL로 되돌리지 않는다
        if (
            observed_status == JobStatus.COMPLETED
            and result_url
            and not storage.owns(record.video_url)
        ):
            record.video_url = result_url
        record.updated_at = datetime.now(UTC)
        session.add(record)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to update video record {record.id}: {e}")


def check_video(
    video_id: str | None,
    record_id: int | None,
    session: Session,
    storage: ObjectStorage,
    provider: OpenAIVideoProvider,
    settings: Settings,
) -> dict:
    """Sora 작업 상태를 확인하고, 완료됐으면 결과를 보관한다.

    상태 흐름 (Sora 기준):
        queued / in_progress ──▶ completed   (결과 URL 찾기 → 최초 1회 보관)
                             └─▶ failed      (상태만 갱신)
    모르는 상태 문자열은 진행 중으로 본다.
    """
    if not video_id:
        raise ValidationError("Video ID required")

    video = provider.retrieve_video(video_id)
    status = video.get("status")
    logger.info(f"Video {video_id}: {describe(video)}")

    record = None
    if record_id is not None:
        try:
            record = session.get(VideoJob, record_id)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to read video record {record_id}: {e}")
        if record is None:
            logger.warning(f"Video record {record_id} not found, continuing without it")

    video_url = None
    if status == JobStatus.COMPLETED:
        source_url = provider.result_url(video, video_id)
        if source_url and record is not None and storage.owns(record.video_url):
            video_url = _resign_existing(record, storage, settings)
        elif source_url:
            try:
                archived = archive_video(
                    source_url, video_id, record_id, session, storage, provider, settings
                )
                video_url = archived.signed_url
            except (DownloadError, StorageError) as e:
                logger.error(f"Failed to archive video {video_id}, using provider URL: {e}")
                video_url = source_url

    if record is not None:
        stored = None
        if video_url and not storage.owns(video_url):
            stored = video_url
        _update_record(session, record, status, stored, storage)

    return {
        "status": status,
        "videoUrl": video_url,
        "progress": video.get("progress"),
        "videoData": video,
    }
