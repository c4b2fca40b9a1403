from datetime import UTC, datetime

from sqlmodel import Field, SQLModel

from model.status import JobStatus


class ImageJob(SQLModel, table=True):
    __tablename__ = "images"

    id: int | None = Field(default=None, primary_key=True)
    prompt: str
    image1_url: str | None = None
    image2_url: str | None = None
    image3_url: str | None = None
    provider: str = Field(default="gemini")
    # 동기 생성이라 completed로만 삽입된다. 나머지 값은 목록 화면 호환용
    status: str = Field(default=JobStatus.COMPLETED)
    image_url: str | None = None  # 스토리지 핸들 (서명 URL 아님)
    generation_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
