from datetime import UTC, datetime

from sqlmodel import Field, SQLModel

from model.status import JobStatus


class VideoJob(SQLModel, table=True):
    __tablename__ = "videos"

    id: int | None = Field(default=None, primary_key=True)
    prompt: str
    image1_url: str | None = None
    image2_url: str | None = None
    status: str = Field(default=JobStatus.PROCESSING)  # queued, in_progress, completed, failed
    video_id: str | None = Field(default=None, index=True)  # Sora 작업 ID
    # null → (잠깐) Sora URL → 스토리지 핸들. 핸들이 된 뒤에는 되돌리지 않는다
    video_url: str | None = None
    openai_url: str | None = None  # 보관 후에도 남겨두는 원본 URL
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
