"""
Error Classification Tests

스토리지 예외 계층 및 오류 분류
"""

import pytest


class TestErrorHierarchy:
    """예외 계층 테스트"""

    @pytest.mark.parametrize("name", [
        "ConfigurationError",
        "NotInitializedError",
        "NotFoundError",
        "StorageTimeoutError",
        "TransportError",
        "AmbiguousResultError",
        "IrrecoverableError",
    ])
    def test_subclasses_base(self, name):
        import errors

        assert issubclass(getattr(errors, name), errors.ArtifactStorageError)

    def test_timeout_is_builtin_timeout(self):
        """StorageTimeoutError는 TimeoutError로도 잡힘"""
        from errors import StorageTimeoutError

        with pytest.raises(TimeoutError):
            raise StorageTimeoutError("upload timed out")

    def test_context_is_copied(self):
        from errors import NotFoundError

        context = {"bucket_url": "s3://b"}
        error = NotFoundError("missing", context=context)
        error.context["key"] = "a"

        assert context == {"bucket_url": "s3://b"}

    def test_transport_error_message(self):
        """백엔드 코드와 메시지 포함"""
        from errors import TransportError

        error = TransportError("failed to write", code="SlowDown", backend_message="reduce rate")

        assert str(error) == "failed to write: SlowDown: reduce rate"
        assert error.code == "SlowDown"

    def test_transport_error_without_details(self):
        from errors import TransportError

        assert str(TransportError("failed to write")) == "failed to write"

    def test_collection_error_inherits_cause_type(self):
        from errors import CollectionError, ErrorType, NotFoundError, Retryable, StorageTimeoutError

        error = CollectionError("failed", "a.txt", ["s3://b/x"], cause=StorageTimeoutError("slow"))

        assert error.error_type == ErrorType.NETWORK_TIMEOUT
        assert error.retryable == Retryable.YES
        assert error.urls == ["s3://b/x"]
        assert error.context == {"file_name": "a.txt"}

        assert CollectionError("f", "a", cause=NotFoundError("x")).error_type == ErrorType.STORAGE_NOT_FOUND

    def test_collection_error_from_os_error(self):
        from errors import CollectionError, ErrorType

        assert CollectionError("f", "a", cause=FileNotFoundError()).error_type == ErrorType.STORAGE_NOT_FOUND
        assert CollectionError("f", "a", cause=PermissionError()).error_type == ErrorType.STORAGE_IO


class TestErrorClassification:
    """오류 분류 테스트"""

    def test_classify_storage_error(self):
        """스토리지 예외는 자체 분류와 context 사용"""
        from errors import ErrorType, IrrecoverableError, Severity, classify_error

        error = IrrecoverableError("unable to delete", context={"stack_name": "s"})
        info = classify_error(error, {"attempt": 2})

        assert info.error_type == ErrorType.BUSINESS_CONSTRAINT
        assert info.severity == Severity.CRITICAL
        assert info.context == {"stack_name": "s", "attempt": 2}

    def test_classify_timeout_error(self):
        """타임아웃 오류 분류 테스트"""
        from errors import classify_error, ErrorType

        info = classify_error(TimeoutError("Connection timed out"))

        assert info.error_type == ErrorType.NETWORK_TIMEOUT

    def test_classify_connection_error(self):
        from errors import classify_error, ErrorType

        info = classify_error(ConnectionError("Failed to connect"))

        assert info.error_type == ErrorType.NETWORK_CONNECTION

    def test_classify_file_not_found(self):
        from errors import classify_error, ErrorType

        info = classify_error(FileNotFoundError("File not found"))

        assert info.error_type == ErrorType.STORAGE_NOT_FOUND

    def test_classify_subclass(self):
        """매핑에 없는 하위 클래스는 상위 클래스 분류 사용"""
        from errors import classify_error, ErrorType

        info = classify_error(IsADirectoryError("is a directory"))

        assert info.error_type == ErrorType.SYSTEM_OS

    def test_classify_unknown_error(self):
        from errors import classify_error, ErrorType

        class CustomError(Exception):
            pass

        info = classify_error(CustomError("Unknown"))

        assert info.error_type == ErrorType.UNKNOWN

    def test_error_types(self):
        """분류에 실제로 쓰이는 오류 유형만 정의"""
        from errors import ErrorType

        assert {e.value for e in ErrorType} == {
            "network_timeout",
            "network_connection",
            "api_server_error",
            "data_validation",
            "storage_permission",
            "storage_not_found",
            "storage_io",
            "system_os",
            "system_config",
            "business_constraint",
            "unknown",
        }


class TestErrorInfo:
    """ErrorInfo 테스트"""

    def test_error_id_generated(self):
        from errors import classify_error

        info = classify_error(ValueError("bad"))

        assert info.error_id is not None
        assert len(info.error_id) == 12

    def test_traceback_optional(self):
        from errors import classify_error

        try:
            raise ValueError("bad")
        except ValueError as e:
            with_tb = classify_error(e)
            without_tb = classify_error(e, include_traceback=False)

        assert "ValueError" in with_tb.traceback
        assert without_tb.traceback is None

    def test_to_dict(self):
        from errors import classify_error, NotFoundError

        data = classify_error(NotFoundError("missing", {"bucket_url": "s3://b/k"})).to_dict()

        assert data["error_type"] == "storage_not_found"
        assert data["severity"] == "warning"
        assert data["context"] == {"bucket_url": "s3://b/k"}
        assert data["message"] == "missing"
