"""
Error Classification and Handling

스토리지/스택 작업 오류 계층 및 분류 시스템
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type
import traceback
import hashlib


class ErrorType(str, Enum):
    """오류 유형 분류"""
    # 네트워크 관련
    NETWORK_TIMEOUT = "network_timeout"
    NETWORK_CONNECTION = "network_connection"

    # API 관련
    API_SERVER_ERROR = "api_server_error"

    # 데이터 관련
    DATA_VALIDATION = "data_validation"

    # 스토리지 관련
    STORAGE_PERMISSION = "storage_permission"
    STORAGE_NOT_FOUND = "storage_not_found"
    STORAGE_IO = "storage_io"

    # 시스템 관련
    SYSTEM_OS = "system_os"
    SYSTEM_CONFIG = "system_config"

    # 비즈니스 로직
    BUSINESS_CONSTRAINT = "business_constraint"

    # 알 수 없음
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """오류 심각도"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Retryable(str, Enum):
    """재시도 가능 여부"""
    YES = "yes"
    NO = "no"
    CONDITIONAL = "conditional"


# =============================================================================
# 예외 계층
# =============================================================================

class ArtifactStorageError(Exception):
    """
    스토리지 계층 공통 예외

    context에는 어떤 호출이 어떤 리소스에 대해 실패했는지 기록합니다
    (operation, bucket_url, object_name, stack_name 등).
    """

    error_type: ErrorType = ErrorType.UNKNOWN
    severity: Severity = Severity.ERROR
    retryable: Retryable = Retryable.NO

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class ConfigurationError(ArtifactStorageError):
    """리전/프로바이더 종류 등 필수 설정 누락"""
    error_type = ErrorType.SYSTEM_CONFIG


class NotInitializedError(ArtifactStorageError):
    """초기화 전에 프로바이더 사용"""
    error_type = ErrorType.SYSTEM_CONFIG


class NotFoundError(ArtifactStorageError):
    """버킷 또는 오브젝트 없음"""
    error_type = ErrorType.STORAGE_NOT_FOUND
    severity = Severity.WARNING


class StorageTimeoutError(ArtifactStorageError, TimeoutError):
    """네트워크 호출 데드라인 초과"""
    error_type = ErrorType.NETWORK_TIMEOUT
    severity = Severity.WARNING
    retryable = Retryable.YES


class TransportError(ArtifactStorageError):
    """백엔드 SDK 오류 (백엔드가 보고한 코드/메시지 포함)"""
    error_type = ErrorType.API_SERVER_ERROR
    retryable = Retryable.CONDITIONAL

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        backend_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if code or backend_message:
            message = f"{message}: {code or 'error'}: {backend_message or ''}".rstrip(": ")
        super().__init__(message, context)
        self.code = code
        self.backend_message = backend_message


class AmbiguousResultError(ArtifactStorageError):
    """describe 결과가 2개 이상"""
    error_type = ErrorType.DATA_VALIDATION


class IrrecoverableError(ArtifactStorageError):
    """재시도 후에도 복구 불가"""
    error_type = ErrorType.BUSINESS_CONSTRAINT
    severity = Severity.CRITICAL


class CollectionError(ArtifactStorageError):
    """
    파일 수집 중단

    실패 전까지 업로드된 URL은 urls에 남아 있습니다.
    """

    def __init__(
        self,
        message: str,
        file_name: str,
        urls: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, {"file_name": file_name})
        self.file_name = file_name
        self.urls: List[str] = list(urls or [])
        if isinstance(cause, ArtifactStorageError):
            self.error_type = cause.error_type
            self.retryable = cause.retryable
        elif isinstance(cause, FileNotFoundError):
            self.error_type = ErrorType.STORAGE_NOT_FOUND
        elif isinstance(cause, OSError):
            self.error_type = ErrorType.STORAGE_IO


@dataclass
class ErrorInfo:
    """오류 정보"""
    error_type: ErrorType
    severity: Severity
    retryable: Retryable
    message: str
    original_exception: Optional[Exception] = None
    traceback: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.utcnow)
    error_id: Optional[str] = None

    def __post_init__(self):
        if self.error_id is None:
            self.error_id = self._generate_error_id()

    def _generate_error_id(self) -> str:
        """고유 에러 ID 생성"""
        content = f"{self.error_type.value}:{self.message}:{self.timestamp.isoformat()}"
        return hashlib.md5(content.encode()).hexdigest()[:12]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "error_type": self.error_type.value,
            "severity": self.severity.value,
            "retryable": self.retryable.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "traceback": self.traceback,
        }


# 표준 예외 유형별 분류 매핑
EXCEPTION_MAPPING: Dict[Type[Exception], Dict[str, Any]] = {
    TimeoutError: {
        "error_type": ErrorType.NETWORK_TIMEOUT,
        "severity": Severity.WARNING,
        "retryable": Retryable.YES,
    },
    ConnectionError: {
        "error_type": ErrorType.NETWORK_CONNECTION,
        "severity": Severity.WARNING,
        "retryable": Retryable.YES,
    },
    ValueError: {
        "error_type": ErrorType.DATA_VALIDATION,
        "severity": Severity.WARNING,
        "retryable": Retryable.NO,
    },
    FileNotFoundError: {
        "error_type": ErrorType.STORAGE_NOT_FOUND,
        "severity": Severity.WARNING,
        "retryable": Retryable.NO,
    },
    PermissionError: {
        "error_type": ErrorType.STORAGE_PERMISSION,
        "severity": Severity.ERROR,
        "retryable": Retryable.NO,
    },
    OSError: {
        "error_type": ErrorType.SYSTEM_OS,
        "severity": Severity.ERROR,
        "retryable": Retryable.CONDITIONAL,
    },
}


def classify_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    include_traceback: bool = True,
) -> ErrorInfo:
    """
    예외를 분류하여 ErrorInfo 반환

    Args:
        exception: 분류할 예외
        context: 추가 컨텍스트 정보
        include_traceback: 트레이스백 포함 여부

    Returns:
        ErrorInfo: 분류된 오류 정보
    """
    context = dict(context or {})

    if isinstance(exception, ArtifactStorageError):
        # 스토리지 예외는 자체 분류를 사용
        context = {**exception.context, **context}
        error_type = exception.error_type
        severity = exception.severity
        retryable = exception.retryable
    else:
        mapping = EXCEPTION_MAPPING.get(type(exception))
        if mapping is None:
            # 상위 클래스 확인
            for base_type, base_mapping in EXCEPTION_MAPPING.items():
                if isinstance(exception, base_type):
                    mapping = base_mapping
                    break

        if mapping is None:
            mapping = {
                "error_type": ErrorType.UNKNOWN,
                "severity": Severity.ERROR,
                "retryable": Retryable.NO,
            }
        error_type = mapping["error_type"]
        severity = mapping["severity"]
        retryable = mapping["retryable"]

    # 트레이스백 생성
    tb = None
    if include_traceback:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))

    return ErrorInfo(
        error_type=error_type,
        severity=severity,
        retryable=retryable,
        message=str(exception),
        original_exception=exception,
        traceback=tb,
        context=context,
    )
