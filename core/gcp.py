"""
GCP 공통 유틸리티

google-cloud-storage 클라이언트 생성과 google-api-core 예외 변환
"""

from contextlib import contextmanager
from typing import Optional

import requests
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from errors import ConfigurationError, NotFoundError, StorageTimeoutError, TransportError


def create_storage_client(
    project_id: Optional[str] = None,
    credentials_path: Optional[str] = None,
) -> storage.Client:
    """storage.Client 생성 (서비스 계정 키가 있으면 사용)"""
    if credentials_path:
        return storage.Client.from_service_account_json(
            credentials_path,
            project=project_id,
        )
    return storage.Client(project=project_id)


@contextmanager
def gcs_call(operation: str, **context):
    """google-cloud 예외를 스토리지 예외로 변환하는 호출 범위"""
    context = {"operation": operation, **context}
    try:
        yield
    except gcs_exceptions.NotFound as e:
        raise NotFoundError(f"{operation}: {e.message}", context=context) from e
    except (requests.exceptions.Timeout, gcs_exceptions.DeadlineExceeded) as e:
        raise StorageTimeoutError(f"{operation}: timed out: {e}", context=context) from e
    except gcs_exceptions.GoogleAPICallError as e:
        raise TransportError(
            operation,
            code=str(int(e.code)) if e.code else None,
            backend_message=e.message,
            context=context,
        ) from e
    except auth_exceptions.GoogleAuthError as e:
        # 자격 증명 없음 또는 만료
        raise ConfigurationError(f"{operation}: GCP credentials are not usable: {e}", context=context) from e
    except (gcs_exceptions.GoogleAPIError, requests.exceptions.RequestException) as e:
        raise TransportError(operation, backend_message=str(e), context=context) from e
