"""pytest 공용 fixture.

모든 API 테스트는 in-memory SQLite DB와 tmp_path 위의 스토리지를 사용해 격리된다.
외부 생성 모델(Gemini, Sora)은 호출 횟수를 기록하는 가짜 구현으로 바꾼다.
- client: 의존성을 전부 테스트용으로 바꾼 TestClient
- storage: 업로드 횟수를 세는 LocalObjectStorage
- image_provider / video_provider: 가짜 생성 모델
"""

import io
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# 앱 import 전에 설정: 모듈 레벨 엔진이 파일 DB를 만들지 않도록
os.environ.setdefault("DATABASE_URL", "sqlite://")

from core.config import Settings
from core.dependencies import (
    get_image_provider,
    get_settings,
    get_storage,
    get_video_provider,
)
from core.exceptions import ConfigurationError, DownloadError, ProviderError
from main import app
from model.database import get_session
from provider.extractors import ExtractContext, build_extractors, resolve_result_url
from storage.local import LocalObjectStorage

BASE_URL = "http://testserver"
OPENAI_BASE = "https://api.openai.com/v1"


def make_png(color: str = "blue", size: tuple[int, int] = (64, 64)) -> bytes:
    """테스트용 PNG 이미지를 메모리에서 생성한다."""
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


class CountingStorage(LocalObjectStorage):
    """put 호출을 기록하는 스토리지 (중복 업로드 검증용)."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.puts: list[str] = []

    def put(self, bucket, name, data, content_type, upsert=False):
        self.puts.append(f"{bucket}/{name}")
        return super().put(bucket, name, data, content_type, upsert=upsert)


class FakeImageProvider:
    tag = "gemini"

    def __init__(self, api_key: str | None = "test-gemini-key"):
        self.api_key = api_key
        self.calls: list[tuple[str, list]] = []
        self.result = make_png("red", (32, 32))
        self.error: ProviderError | None = None

    def ensure_configured(self):
        if not self.api_key:
            raise ConfigurationError("Gemini API key not configured.")

    def generate_image(self, prompt, images):
        self.ensure_configured()
        self.calls.append((prompt, images))
        if self.error:
            raise self.error
        return self.result


class FakeVideoProvider:
    tag = "sora"
    api_base = OPENAI_BASE

    def __init__(self):
        self.created: list[str] = []
        self.retrieved: list[str] = []
        self.downloads: list[str] = []
        self.create_response = {"id": "video_123", "status": "queued"}
        self.create_error: ProviderError | None = None
        self.video = {"id": "video_123", "status": "queued", "progress": 0}
        self.content = b"\x00\x00\x00\x18ftypmp42fake-mp4-bytes"
        self.download_error: DownloadError | None = None
        self.content_fallback = True

    def create_video(self, prompt):
        self.created.append(prompt)
        if self.create_error:
            raise self.create_error
        return dict(self.create_response)

    def retrieve_video(self, video_id):
        self.retrieved.append(video_id)
        return dict(self.video)

    def result_url(self, video, video_id):
        ctx = ExtractContext(video_id=video_id, api_base=self.api_base)
        return resolve_result_url(video, ctx, build_extractors(self.content_fallback))

    def download(self, url):
        self.downloads.append(url)
        if self.download_error:
            raise self.download_error
        return self.content


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        PUBLIC_BASE_URL=BASE_URL,
        STORAGE_DIR=str(tmp_path / "storage"),
        STORAGE_SECRET_KEY="test-secret",
        GEMINI_API_KEY="test-gemini-key",
        OPENAI_API_KEY="test-openai-key",
        DATABASE_URL="sqlite://",
    )


@pytest.fixture()
def session():
    """테스트마다 새 in-memory SQLite DB를 생성한다.

    StaticPool을 사용해야 모든 커넥션이 같은 in-memory DB를 공유한다.
    (기본값은 커넥션마다 별도 DB가 생성되어 테이블이 안 보임)
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture()
def storage(settings):
    return CountingStorage(settings)


@pytest.fixture()
def image_provider():
    return FakeImageProvider()


@pytest.fixture()
def video_provider():
    return FakeVideoProvider()


@pytest.fixture()
def client(session, settings, storage, image_provider, video_provider):
    """모든 외부 의존성을 테스트용으로 오버라이드한 TestClient."""

    def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_image_provider] = lambda: image_provider
    app.dependency_overrides[get_video_provider] = lambda: video_provider
    with TestClient(app, base_url=BASE_URL) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def uploaded(client):
    """이미지를 업로드하고 핸들을 돌려주는 헬퍼."""

    def _upload(slot: str = "image1", color: str = "blue") -> str:
        resp = client.post(
            "/api/upload",
            files={"file": (f"{slot}.png", make_png(color), "image/png")},
            data={"imageNumber": slot},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["url"]

    return _upload
