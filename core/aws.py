"""
AWS 공통 유틸리티

boto3 클라이언트 설정과 botocore 예외 변환
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from errors import NotFoundError, StorageTimeoutError, TransportError

NOT_FOUND_CODES = {"404", "NotFound", "NoSuchBucket", "NoSuchKey"}

# LocationConstraint 없이 생성해야 하는 S3 기본 리전
S3_DEFAULT_REGION = "us-east-1"


def create_boto_config(timeout: int) -> Config:
    """
    botocore Config 생성

    이 계층은 재시도하지 않으므로 전체 시도 횟수를 1로 고정합니다.
    """
    return Config(
        retries={"total_max_attempts": 1, "mode": "standard"},
        connect_timeout=timeout,
        read_timeout=timeout,
    )


def create_client(
    service_name: str,
    region: Optional[str],
    timeout: int,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    endpoint_url: Optional[str] = None,
):
    """boto3 클라이언트 생성"""
    kwargs: Dict[str, Any] = {
        "region_name": region or None,
        "config": create_boto_config(timeout),
    }
    if access_key_id and secret_access_key:
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.client(service_name, **kwargs)


def client_error_details(error: ClientError) -> Tuple[str, str]:
    """ClientError에서 (code, message) 추출"""
    err = error.response.get("Error", {})
    code = str(err.get("Code", ""))
    if not code:
        code = str(error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", ""))
    return code, err.get("Message", "")


@contextmanager
def aws_call(operation: str, **context):
    """
    botocore 예외를 스토리지 예외로 변환하는 호출 범위

    Args:
        operation: 실패 메시지에 들어갈 작업 설명
        context: 리소스 이름 등 진단 정보
    """
    context = {"operation": operation, **context}
    try:
        yield
    except (ConnectTimeoutError, ReadTimeoutError) as e:
        raise StorageTimeoutError(f"{operation}: timed out: {e}", context=context) from e
    except ClientError as e:
        code, message = client_error_details(e)
        if code in NOT_FOUND_CODES:
            raise NotFoundError(f"{operation}: {code}: {message}".rstrip(": "), context=context) from e
        raise TransportError(operation, code=code, backend_message=message, context=context) from e
    except BotoCoreError as e:
        raise TransportError(operation, backend_message=str(e), context=context) from e


def create_bucket_params(bucket_name: str, region: Optional[str]) -> Dict[str, Any]:
    """
    CreateBucket 요청 파라미터

    us-east-1에 LocationConstraint를 지정하면 CreateBucket이 실패하고,
    그 외 리전에서 생략하면 us-east-1에 생성됩니다.
    """
    params: Dict[str, Any] = {"Bucket": bucket_name}
    if region and region != S3_DEFAULT_REGION:
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}
    return params
