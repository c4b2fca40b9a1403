"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"success": false, "error": "..."} 형식의 JSON 응답을 생성한다.
클라이언트에는 HTTP 상태코드와 메시지만 노출하고, error_code는 로그용이다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 입력 / 설정 ---


class ValidationError(AppException):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Invalid request"


class ConfigurationError(AppException):
    status_code = 500
    error_code = "CONFIGURATION_ERROR"
    message = "Server is missing a required credential"


# --- 외부 서비스 ---


class ProviderError(AppException):
    """생성 모델 API가 2xx가 아니거나 응답 형태가 깨졌을 때."""

    status_code = 500
    error_code = "PROVIDER_ERROR"
    message = "Generation provider request failed"

    def __init__(self, message: str | None = None, provider_status: int | None = None):
        self.provider_status = provider_status
        super().__init__(message)


class StorageError(AppException):
    """오브젝트 스토리지 또는 레코드 저장소 실패."""

    status_code = 500
    error_code = "STORAGE_ERROR"
    message = "Storage operation failed"


class ObjectAlreadyExists(StorageError):
    error_code = "OBJECT_EXISTS"
    message = "Object already exists"


class ObjectNotFound(StorageError):
    status_code = 404
    error_code = "OBJECT_NOT_FOUND"
    message = "Object not found"


class DownloadError(AppException):
    status_code = 500
    error_code = "DOWNLOAD_ERROR"
    message = "Failed to download generated asset"


# --- 조회 / 접근 ---


class RecordNotFound(AppException):
    status_code = 404
    error_code = "RECORD_NOT_FOUND"
    message = "Record not found"


class InvalidSignature(AppException):
    status_code = 403
    error_code = "INVALID_SIGNATURE"
    message = "Signed URL is invalid or expired"
