from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "hug-studio"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "DEBUG"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 레코드 저장소 (로컬: SQLite → 배포: PostgreSQL)
    DATABASE_URL: str = "sqlite:///./hug_studio.db"

    # 오브젝트 스토리지
    STORAGE_DIR: str = "/app/storage"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    IMAGE_BUCKET: str = "hug-images"
    VIDEO_BUCKET: str = "hug-videos"

    # 서명 URL (JWT 토큰, 기본 7일)
    STORAGE_SECRET_KEY: str = "dev-storage-secret-change-in-production"
    SIGNED_URL_ALGORITHM: str = "HS256"
    SIGNED_URL_EXPIRE_SECONDS: int = 60 * 60 * 24 * 7

    # 갤러리
    GALLERY_LIMIT: int = 50

    # 이미지 생성 (Gemini)
    GEMINI_API_KEY: str | None = None
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"

    # 영상 생성 (OpenAI Sora)
    OPENAI_API_KEY: str | None = None
    OPENAI_ORG_ID: str | None = None
    OPENAI_API_BASE: str = "https://api.openai.com/v1"
    SORA_MODEL: str = "sora-2"
    # 완료됐는데 URL 필드가 없으면 /videos/{id}/content 경로를 시도할지 여부
    VIDEO_CONTENT_FALLBACK: bool = True

    # 네트워크
    PROVIDER_TIMEOUT_SECONDS: float = 120.0
    DOWNLOAD_TIMEOUT_SECONDS: float = 300.0
    REFERENCE_FETCH_WORKERS: int = 3

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
