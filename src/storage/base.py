"""오브젝트 스토리지 인터페이스.

서비스 계층은 이 인터페이스만 알고, 실제 백엔드(local.py)는 lifespan에서
한 번 만들어 app.state에 올린다. 테스트는 tmp_path 위의 백엔드를 주입한다.

용어:
- 핸들(handle): 서명 없는 안정적인 URL. 레코드에 저장되는 값.
- 서명 URL: 핸들 + 만료 토큰. 응답에만 쓰고 저장하지 않는다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit


@dataclass
class StoredObject:
    bucket: str
    name: str
    data: bytes
    content_type: str | None = None


def object_name_from_url(url: str) -> str:
    """핸들/서명 URL/공개 URL에서 오브젝트 이름(마지막 경로 조각)을 꺼낸다.

    쿼리스트링(서명 토큰)은 버린다. 이름만 넘어와도 그대로 반환한다.
    """
    path = urlsplit(url).path or url
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


class ObjectStorage(ABC):
    @abstractmethod
    def put(
        self,
        bucket: str,
        name: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """오브젝트를 저장하고 핸들을 반환한다.

        upsert=False인데 같은 이름이 있으면 ObjectAlreadyExists.
        """

    @abstractmethod
    def get(self, bucket: str, name: str) -> StoredObject:
        """인증된 읽기. 없으면 ObjectNotFound."""

    @abstractmethod
    def exists(self, bucket: str, name: str) -> bool: ...

    @abstractmethod
    def handle_for(self, bucket: str, name: str) -> str: ...

    @abstractmethod
    def create_signed_url(self, bucket: str, name: str) -> str:
        """시간 제한 서명 URL을 발급한다."""

    @abstractmethod
    def handle_prefix(self) -> str:
        """모든 핸들이 공유하는 접두사. 레코드 조건부 갱신(SQL LIKE)에 쓴다."""

    def owns(self, url: str | None) -> bool:
        """이 스토리지가 발급한 핸들/서명 URL인지 판별한다."""
        return bool(url) and url.startswith(self.handle_prefix())
