"""Sora 결과 영상을 우리 스토리지로 옮기는 보관 단계.

Sora가 주는 URL은 만료되거나 인증이 필요하므로, 완료 시점에 한 번 내려받아
영상 버킷에 저장하고 그 핸들을 레코드에 남긴다.

중복 보관 방지 (폴링 요청이 동시에 들어와도 객체는 하나):
1. 레코드가 이미 스토리지 핸들을 갖고 있으면 다운로드 없이 재서명만 한다.
2. 오브젝트 이름은 작업 ID로 고정된다 → 이미 있으면 그대로 재사용.
3. 업로드는 덮어쓰기 금지. 경쟁에서 지면 상대가 올린 객체를 재사용.
4. 레코드 갱신은 video_url이 아직 핸들이 아닐 때만 적용되는 조건부 UPDATE.
"""

import time
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col

from core.config import Settings
from core.exceptions import ObjectAlreadyExists, ValidationError
from model.video import VideoJob
from provider.sora import OpenAIVideoProvider
from storage.base import ObjectStorage, object_name_from_url


@dataclass
class ArchiveResult:
    signed_url: str
    handle: str
    source_url: str
    reused: bool  # True면 이번 호출에서 다운로드/업로드가 없었음


def video_object_name(video_id: str | None) -> str:
    return f"{video_id or int(time.time() * 1000)}_hug-video.mp4"


def _load_record(session: Session, record_id: int | None) -> VideoJob | None:
    if record_id is None:
        return None
    try:
        return session.get(VideoJob, record_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to read video record {record_id}: {e}")
        return None


def mark_archived(
    session: Session,
    storage: ObjectStorage,
    record_id: int,
    handle: str,
    source_url: str,
) -> bool:
    """video_url이 아직 스토리지 핸들이 아닐 때만 핸들로 바꾼다.

    Returns:
        이번 호출이 실제로 행을 갱신했으면 True.
    """
    stmt = (
        update(VideoJob)
        .where(col(VideoJob.id) == record_id)
        .where(
            or_(
                col(VideoJob.video_url).is_(None),
                col(VideoJob.video_url).not_like(f"{storage.handle_prefix()}%"),
            )
        )
        .values(video_url=handle, openai_url=source_url, updated_at=datetime.now(UTC))
    )
    try:
        result = session.exec(stmt)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to update video record {record_id}: {e}")
        return False
    return result.rowcount > 0


def archive_video(
    video_url: str | None,
    video_id: str | None,
    record_id: int | None,
    session: Session,
    storage: ObjectStorage,
    provider: OpenAIVideoProvider,
    settings: Settings,
) -> ArchiveResult:
    if not video_url:
        raise ValidationError("Video URL required")

    bucket = settings.VIDEO_BUCKET
    record = _load_record(session, record_id)

    if record is not None and storage.owns(record.video_url):
        name = object_name_from_url(record.video_url)
        logger.info(f"Video {video_id} already archived as {name}, re-signing")
        return ArchiveResult(
            signed_url=storage.create_signed_url(bucket, name),
            handle=record.video_url,
            source_url=video_url,
            reused=True,
        )

    name = video_object_name(video_id)
    reused = storage.exists(bucket, name)
    if reused:
        handle = storage.handle_for(bucket, name)
        logger.info(f"Object {bucket}/{name} already exists, skipping download")
    else:
        logger.info(f"Archiving video {video_id} from {video_url}")
        data = provider.download(video_url)
        try:
            handle = storage.put(bucket, name, data, "video/mp4")
        except ObjectAlreadyExists:
            # 동시에 들어온 다른 요청이 먼저 올렸다
            handle = storage.handle_for(bucket, name)
            reused = True

    signed_url = storage.create_signed_url(bucket, name)

    if record_id is not None:
        if mark_archived(session, storage, record_id, handle, video_url):
            logger.info(f"Video record {record_id} now points at {bucket}/{name}")

    return ArchiveResult(
        signed_url=signed_url, handle=handle, source_url=video_url, reused=reused
    )
