"""에러 응답 형식 검증 테스트.

모든 에러가 {"success": false, "error": "..."} 형식인지 확인한다.
"""


def test_validation_error_format(client):
    resp = client.post("/api/create-video", json={})
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert isinstance(data["error"], str) and data["error"]
    assert "error_code" not in data


def test_body_type_error_is_400(client):
    """본문 타입 오류(FastAPI 422)도 400 + 같은 형식."""
    resp = client.post("/api/create-image", json={"imageUrls": "not-a-list"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "imageUrls" in resp.json()["error"]


def test_malformed_json_is_400(client):
    resp = client.post(
        "/api/check-video",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_configuration_error_format(client, image_provider):
    image_provider.api_key = None
    resp = client.post(
        "/api/create-image",
        json={"imageUrls": ["http://testserver/storage/hug-images/a.png"]},
    )
    assert resp.status_code == 500
    assert resp.json()["success"] is False
