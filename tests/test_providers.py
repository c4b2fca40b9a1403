"""Gemini / Sora 어댑터 테스트 (requests.Session을 mock으로 대체)."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from core.config import Settings
from core.exceptions import ConfigurationError, DownloadError, ProviderError
from provider.gemini import GeminiImageProvider, InlineImage, extract_inline_image
from provider.sora import OpenAIVideoProvider, translate_create_error


def _response(status: int, body) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body if isinstance(body, bytes) else json.dumps(body).encode()
    return resp


def _settings(**overrides) -> Settings:
    values = {"GEMINI_API_KEY": "g-key", "OPENAI_API_KEY": "o-key"}
    values.update(overrides)
    return Settings(**values)


IMG = InlineImage(mime_type="image/png", data="aGVsbG8=")


class TestGemini:
    def test_payload_shape(self):
        session = MagicMock()
        session.post.return_value = _response(
            200,
            {"candidates": [{"content": {"parts": [{"text": "ok"}, {"inlineData": {"data": "aGk="}}]}}]},
        )
        provider = GeminiImageProvider(_settings(), session=session)

        assert provider.generate_image("hug", [IMG, IMG]) == b"hi"

        _, kwargs = session.post.call_args
        assert kwargs["headers"] == {"x-goog-api-key": "g-key"}
        parts = kwargs["json"]["contents"][0]["parts"]
        assert parts[0] == {"text": "Here are the input images. hug"}
        assert len(parts) == 3
        assert parts[1]["inline_data"]["mime_type"] == "image/png"
        assert kwargs["json"]["generationConfig"]["imageConfig"] == {"aspectRatio": "1:1"}

    def test_snake_case_inline_data(self):
        body = {"candidates": [{"content": {"parts": [{"inline_data": {"data": "aGk="}}]}}]}
        assert extract_inline_image(body) == "aGk="

    def test_missing_key_makes_no_request(self):
        session = MagicMock()
        provider = GeminiImageProvider(_settings(GEMINI_API_KEY=None), session=session)
        with pytest.raises(ConfigurationError):
            provider.generate_image("hug", [IMG])
        session.post.assert_not_called()

    def test_error_message_passed_through(self):
        session = MagicMock()
        session.post.return_value = _response(400, {"error": {"message": "Image too large"}})
        provider = GeminiImageProvider(_settings(), session=session)
        with pytest.raises(ProviderError, match="Image too large"):
            provider.generate_image("hug", [IMG])

    def test_no_image_in_response(self):
        session = MagicMock()
        session.post.return_value = _response(
            200, {"candidates": [{"content": {"parts": [{"text": "I can't do that"}]}}]}
        )
        provider = GeminiImageProvider(_settings(), session=session)
        with pytest.raises(ProviderError, match="No image data returned from Gemini"):
            provider.generate_image("hug", [IMG])


class TestSora:
    def test_create_sends_org_header(self):
        session = MagicMock()
        session.post.return_value = _response(200, {"id": "video_1", "status": "queued"})
        provider = OpenAIVideoProvider(_settings(OPENAI_ORG_ID="org_1"), session=session)

        assert provider.create_video("hug")["id"] == "video_1"
        _, kwargs = session.post.call_args
        assert kwargs["json"] == {"model": "sora-2", "prompt": "hug"}
        assert kwargs["headers"]["Authorization"] == "Bearer o-key"
        assert kwargs["headers"]["OpenAI-Organization"] == "org_1"

    @pytest.mark.parametrize(
        "status, message, expected",
        [
            (401, "Incorrect API key", "Invalid API Key"),
            (403, "Your organization must be verified", "Sora 2 Access Required"),
            (403, "Forbidden", "Access Denied"),
            (429, "Slow down", "Rate Limit"),
            (500, "Upstream exploded", "Upstream exploded"),
        ],
    )
    def test_create_error_guidance(self, status, message, expected):
        assert translate_create_error(status, message).startswith(expected)

    def test_create_error_raises_translated(self):
        session = MagicMock()
        session.post.return_value = _response(401, {"error": {"message": "bad key"}})
        provider = OpenAIVideoProvider(_settings(), session=session)
        with pytest.raises(ProviderError, match="Invalid API Key") as exc:
            provider.create_video("hug")
        assert exc.value.provider_status == 401

    def test_non_json_error_uses_raw_body(self):
        session = MagicMock()
        session.get.return_value = _response(502, b"Bad Gateway")
        provider = OpenAIVideoProvider(_settings(), session=session)
        with pytest.raises(ProviderError, match="Bad Gateway"):
            provider.retrieve_video("video_1")

    def test_download_adds_auth_only_for_openai_urls(self):
        session = MagicMock()
        session.get.return_value = _response(200, b"mp4")
        provider = OpenAIVideoProvider(_settings(), session=session)

        provider.download("https://api.openai.com/v1/videos/video_1/content")
        assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer o-key"

        provider.download("https://cdn.example.com/video.mp4")
        assert session.get.call_args.kwargs["headers"] == {}

    def test_download_failure(self):
        session = MagicMock()
        session.get.return_value = _response(404, b"not found")
        provider = OpenAIVideoProvider(_settings(), session=session)
        with pytest.raises(DownloadError, match="404"):
            provider.download("https://cdn.example.com/video.mp4")

    def test_content_fallback_setting(self):
        provider = OpenAIVideoProvider(_settings(VIDEO_CONTENT_FALLBACK=False), session=MagicMock())
        assert provider.result_url({"status": "completed"}, "video_1") is None
