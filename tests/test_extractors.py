"""결과 영상 URL 추출기 단위 테스트."""

import pytest

from provider.extractors import ExtractContext, build_extractors, resolve_result_url

CTX = ExtractContext(video_id="video_1", api_base="https://api.openai.com/v1")


@pytest.mark.parametrize(
    "video, expected",
    [
        ({"data": [{"url": "https://cdn/a.mp4"}]}, "https://cdn/a.mp4"),
        ({"url": "https://cdn/b.mp4"}, "https://cdn/b.mp4"),
        ({"output_url": "https://cdn/c.mp4"}, "https://cdn/c.mp4"),
        ({"download_url": "https://cdn/d.mp4"}, "https://cdn/d.mp4"),
        ({"file": "file_1"}, "https://api.openai.com/v1/files/file_1/content"),
        ({"file_id": "file_2"}, "https://api.openai.com/v1/files/file_2/content"),
        (
            {"files": [{"id": "file_3", "purpose": "thumbnail"}, {"id": "file_4", "filename": "out.mp4"}]},
            "https://api.openai.com/v1/files/file_4/content",
        ),
        ({"files": [{"id": "file_5", "purpose": "video"}]}, "https://api.openai.com/v1/files/file_5/content"),
    ],
)
def test_each_shape_resolves(video, expected):
    """인식하는 응답 형태마다 URL을 찾는다."""
    video = {"status": "completed", **video}
    assert resolve_result_url(video, CTX, build_extractors(content_fallback=False)) == expected


def test_first_match_wins():
    """data 배열이 url 필드보다 우선한다."""
    video = {"data": [{"url": "https://cdn/first.mp4"}], "url": "https://cdn/second.mp4"}
    assert resolve_result_url(video, CTX, build_extractors()) == "https://cdn/first.mp4"


def test_empty_data_array_falls_through():
    video = {"data": [], "download_url": "https://cdn/x.mp4"}
    assert resolve_result_url(video, CTX, build_extractors()) == "https://cdn/x.mp4"


def test_unmatched_files_fall_back_to_content_endpoint():
    video = {"files": [{"id": "file_9", "purpose": "thumbnail"}]}
    assert (
        resolve_result_url(video, CTX, build_extractors())
        == "https://api.openai.com/v1/videos/video_1/content"
    )


def test_nothing_found_without_fallback():
    video = {"id": "video_1", "status": "completed", "progress": 100}
    assert resolve_result_url(video, CTX, build_extractors(content_fallback=False)) is None
