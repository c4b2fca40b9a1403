"""완료된 Sora 작업 응답에서 결과 영상 URL을 찾는 추출기 목록.

응답 형태가 API 버전마다 달라서 여러 위치를 순서대로 확인한다.
각 추출기는 (video, ctx) → str | None 이고, 처음 값을 돌려준 추출기가 이긴다.
"""

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial


@dataclass(frozen=True)
class ExtractContext:
    video_id: str
    api_base: str  # 예: https://api.openai.com/v1

    def file_content_url(self, file_id: str) -> str:
        return f"{self.api_base}/files/{file_id}/content"

    def video_content_url(self) -> str:
        return f"{self.api_base}/videos/{self.video_id}/content"


Extractor = Callable[[dict, ExtractContext], str | None]


def from_data_array(video: dict, ctx: ExtractContext) -> str | None:
    data = video.get("data")
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("url") or None
    return None


def from_field(field: str, video: dict, ctx: ExtractContext) -> str | None:
    value = video.get(field)
    return value if isinstance(value, str) and value else None


def from_file_id(field: str, video: dict, ctx: ExtractContext) -> str | None:
    file_id = video.get(field)
    if isinstance(file_id, str) and file_id:
        return ctx.file_content_url(file_id)
    return None


def from_files_array(video: dict, ctx: ExtractContext) -> str | None:
    for f in video.get("files") or []:
        if not isinstance(f, dict) or not f.get("id"):
            continue
        if f.get("purpose") == "video" or str(f.get("filename") or "").endswith(".mp4"):
            return ctx.file_content_url(f["id"])
    return None


def from_content_endpoint(video: dict, ctx: ExtractContext) -> str | None:
    """URL 필드가 하나도 없을 때 /videos/{id}/content 규칙으로 만든다."""
    return ctx.video_content_url() if ctx.video_id else None


DEFAULT_EXTRACTORS: list[Extractor] = [
    from_data_array,
    partial(from_field, "url"),
    partial(from_field, "output_url"),
    partial(from_field, "download_url"),
    partial(from_file_id, "file"),
    partial(from_file_id, "file_id"),
    from_files_array,
]


def build_extractors(content_fallback: bool = True) -> list[Extractor]:
    extractors = list(DEFAULT_EXTRACTORS)
    if content_fallback:
        extractors.append(from_content_endpoint)
    return extractors


def resolve_result_url(
    video: dict, ctx: ExtractContext, extractors: list[Extractor]
) -> str | None:
    for extract in extractors:
        url = extract(video, ctx)
        if url:
            return url
    return None
