"""요청 단위 의존성.

설정, 스토리지, 생성 모델 어댑터는 lifespan에서 한 번 만들어 app.state에 올리고
여기서 꺼내 준다. 테스트는 app.dependency_overrides로 가짜 구현을 끼운다.
"""

from fastapi import Request

from core.config import Settings
from provider.gemini import GeminiImageProvider
from provider.sora import OpenAIVideoProvider
from storage.base import ObjectStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_image_provider(request: Request) -> GeminiImageProvider:
    return request.app.state.image_provider


def get_video_provider(request: Request) -> OpenAIVideoProvider:
    return request.app.state.video_provider
