from datetime import UTC, datetime, timedelta

import jwt

from core.config import Settings

# --- 서명 URL 토큰 ---
# 비공개 오브젝트에 시간 제한 접근을 주기 위한 JWT.
#
# Payload:   {"bkt": "hug-images", "obj": "gemini_..._hug-image.png", "exp": ...}
# Signature: HMAC-SHA256(header + payload, STORAGE_SECRET_KEY)
#
# 토큰은 정확히 하나의 bucket/object 쌍에만 유효하다.
# 저장된 레코드에는 토큰을 넣지 않는다 → 읽을 때마다 새로 발급.


def create_signed_token(
    bucket: str,
    name: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """bucket/name 한 쌍에 대한 서명 토큰을 생성한다.

    Args:
        expires_delta: 만료 시간. None이면 SIGNED_URL_EXPIRE_SECONDS 사용.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(seconds=settings.SIGNED_URL_EXPIRE_SECONDS)
    )
    payload = {"bkt": bucket, "obj": name, "exp": expire}
    return jwt.encode(
        payload, settings.STORAGE_SECRET_KEY, algorithm=settings.SIGNED_URL_ALGORITHM
    )


def verify_signed_token(token: str, bucket: str, name: str, settings: Settings) -> bool:
    """토큰이 유효하고 만료되지 않았으며 같은 오브젝트를 가리키는지 확인한다."""
    try:
        payload = jwt.decode(
            token,
            settings.STORAGE_SECRET_KEY,
            algorithms=[settings.SIGNED_URL_ALGORITHM],
        )
    except jwt.PyJWTError:
        return False
    return payload.get("bkt") == bucket and payload.get("obj") == name
