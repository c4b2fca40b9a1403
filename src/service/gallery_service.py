"""갤러리 목록.

저장된 핸들은 서명이 없으므로 목록을 돌려줄 때마다 서명 URL을 새로 만든다.
이전에 발급한 URL은 7일 뒤 만료되기 때문에 재사용하지 않는다.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, col, select

from core.config import Settings
from core.exceptions import StorageError
from model.image import ImageJob
from model.status import JobStatus
from model.video import VideoJob
from storage.base import ObjectStorage, object_name_from_url


def _latest(session: Session, model: type[SQLModel], limit: int) -> list:
    stmt = (
        select(model)
        .order_by(col(model.created_at).desc(), col(model.id).desc())
        .limit(limit)
    )
    try:
        return list(session.exec(stmt).all())
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to list {model.__tablename__}: {e}")
        raise StorageError(f"Failed to fetch {model.__tablename__}")


def _with_signed_url(
    row: SQLModel, url_field: str, bucket: str, storage: ObjectStorage
) -> dict:
    item = row.model_dump()
    handle = item.get(url_field)
    if item.get("status") != JobStatus.COMPLETED or not storage.owns(handle):
        return item
    try:
        item[url_field] = storage.create_signed_url(bucket, object_name_from_url(handle))
    except StorageError as e:
        logger.error(f"Failed to generate signed URL for {bucket} record {item.get('id')}: {e}")
    return item


def list_images(session: Session, storage: ObjectStorage, settings: Settings) -> list[dict]:
    rows = _latest(session, ImageJob, settings.GALLERY_LIMIT)
    return [_with_signed_url(r, "image_url", settings.IMAGE_BUCKET, storage) for r in rows]


def list_videos(session: Session, storage: ObjectStorage, settings: Settings) -> list[dict]:
    rows = _latest(session, VideoJob, settings.GALLERY_LIMIT)
    return [_with_signed_url(r, "video_url", settings.VIDEO_BUCKET, storage) for r in rows]
