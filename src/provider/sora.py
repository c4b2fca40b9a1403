"""OpenAI Sora 영상 생성 어댑터.

- create_video: 작업 생성 → 즉시 {id, status: "queued", ...} 반환
- retrieve_video: 상태 / 진행률 조회 (클라이언트가 5초 간격으로 폴링)
- download: 결과 영상 바이트. api.openai.com 경로는 Bearer 인증 필요
"""

import json

import requests
from loguru import logger

from core.config import Settings
from core.exceptions import ConfigurationError, DownloadError, ProviderError
from provider.extractors import ExtractContext, build_extractors, resolve_result_url
from utility.timer import timed

VERIFICATION_HELP = (
    "\n\nSteps to resolve:\n"
    "1. Verify your organization at https://platform.openai.com/settings/organization/general\n"
    "2. Wait 15-30 minutes after verification\n"
    "3. Generate a new API key\n"
    "4. Make sure your API key has Sora 2 access"
)


def translate_create_error(status_code: int, message: str) -> str:
    """영상 생성 실패 상태코드를 사용자 안내 문구로 바꾼다."""
    if status_code == 403 and "verified" in message:
        return (
            "Sora 2 Access Required: Your OpenAI organization needs verification for Sora 2. "
            "Even after verification, it can take 15-30 minutes for access to activate. "
            "Please try again later or contact OpenAI support." + VERIFICATION_HELP
        )
    if status_code == 403:
        return (
            "Access Denied: Your API key does not have access to Sora 2. "
            "Please check your OpenAI account settings."
        )
    if status_code == 401:
        return "Invalid API Key: Please check your OPENAI_API_KEY in the .env file."
    if status_code == 429:
        return "Rate Limit: Too many requests. Please wait a moment and try again."
    return message


def _error_message(resp: requests.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or default
    if isinstance(body, dict):
        return (body.get("error") or {}).get("message") or default
    return default


class OpenAIVideoProvider:
    tag = "sora"

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.api_key = settings.OPENAI_API_KEY
        self.org_id = settings.OPENAI_ORG_ID
        self.model = settings.SORA_MODEL
        self.api_base = settings.OPENAI_API_BASE.rstrip("/")
        self.timeout = settings.PROVIDER_TIMEOUT_SECONDS
        self.download_timeout = settings.DOWNLOAD_TIMEOUT_SECONDS
        self.extractors = build_extractors(settings.VIDEO_CONTENT_FALLBACK)
        self.session = session or requests.Session()

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "OpenAI API key not configured. Please add OPENAI_API_KEY to your .env file."
            )

    def _headers(self) -> dict:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.org_id:
            headers["OpenAI-Organization"] = self.org_id
        return headers

    def create_video(self, prompt: str) -> dict:
        self.ensure_configured()
        try:
            with timed("sora create"):
                resp = self.session.post(
                    f"{self.api_base}/videos",
                    json={"model": self.model, "prompt": prompt},
                    headers=self._headers(),
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise ProviderError(f"Failed to reach OpenAI: {e}")

        logger.debug(f"Sora create {resp.status_code}: {resp.text[:1000]}")
        if not resp.ok:
            message = _error_message(resp, "Failed to create video")
            logger.error(f"Sora create failed {resp.status_code}: {message}")
            raise ProviderError(
                translate_create_error(resp.status_code, message),
                provider_status=resp.status_code,
            )
        return self._json(resp)

    def retrieve_video(self, video_id: str) -> dict:
        self.ensure_configured()
        try:
            resp = self.session.get(
                f"{self.api_base}/videos/{video_id}",
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"Failed to reach OpenAI: {e}")

        if not resp.ok:
            message = _error_message(resp, "Failed to retrieve video status")
            logger.error(f"Sora retrieve {video_id} failed {resp.status_code}: {message}")
            raise ProviderError(message, provider_status=resp.status_code)
        return self._json(resp)

    def _json(self, resp: requests.Response) -> dict:
        try:
            body = resp.json()
        except ValueError:
            raise ProviderError(f"OpenAI returned a non-JSON response: {resp.text[:200]}")
        if not isinstance(body, dict):
            raise ProviderError("OpenAI returned an unexpected response shape")
        return body

    def result_url(self, video: dict, video_id: str) -> str | None:
        ctx = ExtractContext(video_id=video_id, api_base=self.api_base)
        url = resolve_result_url(video, ctx, self.extractors)
        if not url:
            logger.error(
                f"Video {video_id} completed but no URL found. Fields: {sorted(video.keys())}"
            )
        return url

    def owns_url(self, url: str) -> bool:
        return url.startswith(self.api_base) or "api.openai.com" in url

    def download(self, url: str) -> bytes:
        """결과 영상을 내려받는다. 2xx가 아니면 DownloadError."""
        headers = {}
        if self.owns_url(url):
            self.ensure_configured()
            headers = self._headers()
        try:
            with timed("sora download", slow_ms=30_000) as elapsed:
                resp = self.session.get(url, headers=headers, timeout=self.download_timeout)
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download video: {e}")

        if not resp.ok:
            logger.error(f"Download failed {resp.status_code}: {resp.text[:500]}")
            raise DownloadError(
                f"Failed to download video from OpenAI: {resp.status_code} {resp.text[:500]}"
            )
        logger.info(
            f"Downloaded {len(resp.content)} bytes in {elapsed.ms:.0f}ms "
            f"({resp.headers.get('content-type')})"
        )
        return resp.content


def describe(video: dict) -> str:
    return json.dumps(
        {k: video.get(k) for k in ("id", "status", "progress", "model")}, ensure_ascii=False
    )
