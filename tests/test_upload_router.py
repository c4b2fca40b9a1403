"""업로드 릴레이 (/api/upload) 테스트."""

from conftest import BASE_URL, make_png


class TestUpload:
    def test_upload_returns_storage_handle(self, client, storage):
        """업로드 → 200 + 이미지 버킷의 핸들 (서명 없음)."""
        resp = client.post(
            "/api/upload",
            files={"file": ("me.png", make_png(), "image/png")},
            data={"imageNumber": "image1"},
        )
        assert resp.status_code == 200
        url = resp.json()["url"]
        assert url.startswith(f"{BASE_URL}/storage/hug-images/image1_")
        assert url.endswith(".png")
        assert "token=" not in url
        assert len(storage.puts) == 1

    def test_same_slot_uploads_do_not_collide(self, client):
        """같은 슬롯에 두 번 올려도 이름이 다르다."""
        urls = {
            client.post(
                "/api/upload",
                files={"file": ("a.png", make_png(), "image/png")},
                data={"imageNumber": "image2"},
            ).json()["url"]
            for _ in range(2)
        }
        assert len(urls) == 2

    def test_generic_content_type_is_sniffed(self, client, storage, settings):
        """application/octet-stream이면 Pillow로 실제 포맷을 읽는다."""
        resp = client.post(
            "/api/upload",
            files={"file": ("blob", make_png(), "application/octet-stream")},
            data={"imageNumber": "image3"},
        )
        name = resp.json()["url"].rsplit("/", 1)[-1]
        assert name.endswith(".png")
        assert storage.get(settings.IMAGE_BUCKET, name).content_type == "image/png"

    def test_upload_without_file(self, client, storage):
        """파일 없음 → 400, 스토리지 쓰기 없음."""
        resp = client.post("/api/upload", data={"imageNumber": "image1"})
        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert storage.puts == []

    def test_upload_empty_file(self, client):
        """빈 파일 → 400."""
        resp = client.post(
            "/api/upload",
            files={"file": ("empty.png", b"", "image/png")},
        )
        assert resp.status_code == 400
