"""파일시스템 기반 오브젝트 스토리지.

레이아웃: {STORAGE_DIR}/{bucket}/{name} + {name}.meta.json (content_type)
서명 URL은 이 서버의 /storage/{bucket}/{name}?token=... 로 발급되고,
storage_router가 토큰을 검증한 뒤 파일을 내려준다.
"""

import json
import os
import re
import uuid
from pathlib import Path
from urllib.parse import quote

from loguru import logger

from core.config import Settings
from core.exceptions import ObjectAlreadyExists, ObjectNotFound, StorageError
from core.security import create_signed_token
from storage.base import ObjectStorage, StoredObject

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
META_SUFFIX = ".meta.json"


class LocalObjectStorage(ObjectStorage):
    def __init__(self, settings: Settings, root: str | Path | None = None):
        self.settings = settings
        self.root = Path(root or settings.STORAGE_DIR)
        self.base_url = settings.PUBLIC_BASE_URL.rstrip("/")

    # --- 경로 ---

    def _path(self, bucket: str, name: str) -> Path:
        for segment in (bucket, name):
            if not _SAFE_SEGMENT.match(segment) or segment.endswith(META_SUFFIX):
                raise StorageError(f"Invalid object path: {bucket}/{name}")
        return self.root / bucket / name

    # --- 쓰기 / 읽기 ---

    def put(
        self,
        bucket: str,
        name: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        path = self._path(bucket, name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(f".{name}.{uuid.uuid4().hex}.tmp")
            tmp.write_bytes(data)
            try:
                if upsert:
                    os.replace(tmp, path)
                else:
                    # link는 대상이 있으면 실패한다 → 동시 업로드 중 하나만 성공
                    os.link(tmp, path)
            finally:
                tmp.unlink(missing_ok=True)
            path.with_name(name + META_SUFFIX).write_text(
                json.dumps({"content_type": content_type})
            )
        except FileExistsError:
            raise ObjectAlreadyExists(f"Object already exists: {bucket}/{name}")
        except OSError as e:
            raise StorageError(f"Failed to upload {name}: {e}")

        logger.info(f"Stored {bucket}/{name} ({len(data)} bytes, {content_type})")
        return self.handle_for(bucket, name)

    def get(self, bucket: str, name: str) -> StoredObject:
        path = self._path(bucket, name)
        if not path.is_file():
            raise ObjectNotFound(f"Failed to download {name}: object not found")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to download {name}: {e}")
        return StoredObject(
            bucket=bucket,
            name=name,
            data=data,
            content_type=self._read_content_type(path),
        )

    def exists(self, bucket: str, name: str) -> bool:
        return self._path(bucket, name).is_file()

    def _read_content_type(self, path: Path) -> str | None:
        meta = path.with_name(path.name + META_SUFFIX)
        try:
            return json.loads(meta.read_text()).get("content_type")
        except (OSError, ValueError):
            return None

    # --- URL ---

    def handle_for(self, bucket: str, name: str) -> str:
        return f"{self.handle_prefix()}{bucket}/{quote(name)}"

    def create_signed_url(self, bucket: str, name: str) -> str:
        self._path(bucket, name)
        token = create_signed_token(bucket, name, self.settings)
        return f"{self.handle_for(bucket, name)}?token={token}"

    def handle_prefix(self) -> str:
        return f"{self.base_url}/storage/"
