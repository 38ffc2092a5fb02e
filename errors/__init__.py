"""
Errors Module

스토리지 오류 계층 및 분류
"""

from errors.errors import (
    ErrorType,
    Severity,
    Retryable,
    ErrorInfo,
    ArtifactStorageError,
    ConfigurationError,
    NotInitializedError,
    NotFoundError,
    StorageTimeoutError,
    TransportError,
    AmbiguousResultError,
    IrrecoverableError,
    CollectionError,
    classify_error,
    EXCEPTION_MAPPING,
)

__all__ = [
    "ErrorType",
    "Severity",
    "Retryable",
    "ErrorInfo",
    "ArtifactStorageError",
    "ConfigurationError",
    "NotInitializedError",
    "NotFoundError",
    "StorageTimeoutError",
    "TransportError",
    "AmbiguousResultError",
    "IrrecoverableError",
    "CollectionError",
    "classify_error",
    "EXCEPTION_MAPPING",
]
