"""Gemini 이미지 생성 어댑터 (gemini-2.5-flash-image, "Nano Banana").

참조 이미지 최대 3장 + 텍스트 지시 → 정사각형 이미지 1장 (동기 호출).
https://ai.google.dev/gemini-api/docs/image-generation
"""

import base64
from dataclasses import dataclass

import requests
from loguru import logger

from core.config import Settings
from core.exceptions import ConfigurationError, ProviderError
from utility.timer import timed

MAX_REFERENCE_IMAGES = 3
PROVIDER_TAG = "gemini"


@dataclass
class InlineImage:
    mime_type: str
    data: str  # base64


class GeminiImageProvider:
    tag = PROVIDER_TAG

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.api_key = settings.GEMINI_API_KEY
        self.model = settings.GEMINI_IMAGE_MODEL
        self.endpoint = (
            f"{settings.GEMINI_API_BASE.rstrip('/')}/models/{self.model}:generateContent"
        )
        self.timeout = settings.PROVIDER_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "Gemini API key not configured. Please add GEMINI_API_KEY to your .env file."
            )

    def build_payload(self, prompt: str, images: list[InlineImage]) -> dict:
        parts = [{"text": f"Here are the input images. {prompt}"}]
        parts += [
            {"inline_data": {"mime_type": img.mime_type, "data": img.data}} for img in images
        ]
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": ["Image"],
                "imageConfig": {"aspectRatio": "1:1"},
            },
        }

    def generate_image(self, prompt: str, images: list[InlineImage]) -> bytes:
        """이미지를 생성하고 디코딩된 바이트를 반환한다."""
        self.ensure_configured()
        if not 1 <= len(images) <= MAX_REFERENCE_IMAGES:
            raise ProviderError(
                f"Gemini accepts 1 to {MAX_REFERENCE_IMAGES} reference images, got {len(images)}"
            )

        payload = self.build_payload(prompt, images)
        try:
            with timed(f"gemini generateContent ({len(images)} images)"):
                resp = self.session.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.api_key},
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise ProviderError(f"Failed to reach Gemini: {e}")

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if not resp.ok:
            logger.error(f"Gemini API error {resp.status_code}: {resp.text[:2000]}")
            message = (body.get("error") or {}).get("message") if isinstance(body, dict) else None
            raise ProviderError(
                message or "Failed to generate image with Gemini",
                provider_status=resp.status_code,
            )

        data = extract_inline_image(body)
        if not data:
            logger.error(f"No image data in Gemini response: {str(body)[:2000]}")
            raise ProviderError("No image data returned from Gemini")
        try:
            return base64.b64decode(data)
        except ValueError:
            raise ProviderError("Gemini returned malformed image data")


def extract_inline_image(body: dict) -> str | None:
    """첫 번째 후보에서 inlineData / inline_data 파트의 base64 데이터를 찾는다."""
    candidates = body.get("candidates") or []
    if not candidates:
        return None
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    for part in parts:
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            return inline["data"]
    return None
