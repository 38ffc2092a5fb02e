"""
Blob Backends

URL 스킴으로 선택되는 다중 백엔드 blob 추상화
- s3://bucket      AWS S3 (boto3)
- gs://bucket      Google Cloud Storage
- file:///dir      로컬 파일시스템 (레거시/테스트)
- mem://name       프로세스 메모리 (테스트)
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Type

from google.cloud import storage

from config import config
from core.aws import aws_call, create_bucket_params, create_client
from core.gcp import create_storage_client, gcs_call
from core.logging_config import setup_logger
from errors import ConfigurationError, NotFoundError, TransportError
from storage.locator import BucketLocator

logger = setup_logger(__name__)

_BACKENDS: Dict[str, Type["BlobBucket"]] = {}


def register_backend(*schemes: str) -> Callable[[Type["BlobBucket"]], Type["BlobBucket"]]:
    """스킴에 blob 백엔드 등록"""
    def decorator(cls: Type["BlobBucket"]) -> Type["BlobBucket"]:
        for scheme in schemes:
            _BACKENDS[scheme] = cls
        return cls
    return decorator


def registered_schemes():
    return sorted(_BACKENDS)


def open_bucket(bucket_url: str, timeout: Optional[int] = None) -> "BlobBucket":
    """
    URL 스킴에 맞는 blob 버킷 열기 (네트워크 호출 없음)

    Args:
        bucket_url: scheme://container[/path]
        timeout: 호출별 타임아웃 (초)

    Returns:
        BlobBucket
    """
    locator = BucketLocator.parse(bucket_url)
    backend = _BACKENDS.get(locator.scheme)
    if backend is None:
        raise ConfigurationError(
            f"no blob backend registered for scheme {locator.scheme!r}",
            context={"bucket_url": bucket_url, "schemes": registered_schemes()},
        )
    logger.debug(f"Opening {locator.scheme} blob bucket {bucket_url}")
    return backend(locator, timeout or config.STORAGE_TIMEOUT_SEC)


class BlobBucket(ABC):
    """blob 버킷 공통 인터페이스. 키는 항상 슬래시로 구분"""

    def __init__(self, locator: BucketLocator, timeout: int):
        self.locator = locator
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.locator.container

    @abstractmethod
    def exists(self) -> bool:
        """버킷 존재 여부"""
        pass

    @abstractmethod
    def create(self) -> None:
        pass

    @abstractmethod
    def write_all(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Dict[str, str],
    ) -> None:
        pass

    @abstractmethod
    def read_all(self, key: str) -> bytes:
        """오브젝트 전체 읽기. 없으면 NotFoundError"""
        pass

    def close(self) -> None:
        pass


@register_backend("s3")
class S3BlobBucket(BlobBucket):
    """boto3 기반 S3 blob 버킷"""

    def __init__(self, locator: BucketLocator, timeout: int):
        super().__init__(locator, timeout)
        self.region = config.AWS_REGION
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = create_client(
                "s3",
                region=self.region,
                timeout=self.timeout,
                access_key_id=config.AWS_ACCESS_KEY_ID,
                secret_access_key=config.AWS_SECRET_ACCESS_KEY,
                endpoint_url=config.S3_ENDPOINT_URL,
            )
        return self._client

    def exists(self) -> bool:
        try:
            with aws_call(f"failed to check if {self.name} bucket exists already", bucket=self.name):
                self.client.head_bucket(Bucket=self.name)
        except NotFoundError:
            return False
        return True

    def create(self) -> None:
        with aws_call(f"there was a problem creating the bucket {self.name}", bucket=self.name):
            self.client.create_bucket(**create_bucket_params(self.name, self.region))

    def write_all(self, key, data, content_type, metadata) -> None:
        with aws_call(f"failed to write to bucket {key}", bucket=self.name, key=key):
            self.client.put_object(
                Bucket=self.name,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=metadata,
            )

    def read_all(self, key: str) -> bytes:
        with aws_call(f"failed to read {key}", bucket=self.name, key=key):
            body = self.client.get_object(Bucket=self.name, Key=key)["Body"]
            try:
                return body.read()
            finally:
                body.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


@register_backend("gs")
class GCSBlobBucket(BlobBucket):
    """google-cloud-storage 기반 blob 버킷"""

    def __init__(self, locator: BucketLocator, timeout: int):
        super().__init__(locator, timeout)
        self._client = None

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = create_storage_client(config.GCP_PROJECT_ID, config.GCP_CREDENTIALS_PATH)
        return self._client

    def exists(self) -> bool:
        with gcs_call(f"failed to check if {self.name} bucket exists already", bucket=self.name):
            return self.client.bucket(self.name).exists(timeout=self.timeout, retry=None)

    def create(self) -> None:
        with gcs_call(f"there was a problem creating the bucket {self.name}", bucket=self.name):
            self.client.create_bucket(self.name, timeout=self.timeout, retry=None)

    def write_all(self, key, data, content_type, metadata) -> None:
        with gcs_call(f"failed to write to bucket {key}", bucket=self.name, key=key):
            blob = self.client.bucket(self.name).blob(key)
            blob.metadata = metadata
            blob.upload_from_string(data, content_type=content_type, timeout=self.timeout, retry=None)

    def read_all(self, key: str) -> bytes:
        with gcs_call(f"failed to read {key}", bucket=self.name, key=key):
            blob = self.client.bucket(self.name).blob(key)
            return blob.download_as_bytes(timeout=self.timeout, retry=None)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


@register_backend("file")
class FileBlobBucket(BlobBucket):
    """
    로컬 디렉토리 blob 버킷

    오브젝트 속성은 "<파일>.attrs" JSON 사이드카에 저장합니다.
    """

    ATTRS_SUFFIX = ".attrs"

    def __init__(self, locator: BucketLocator, timeout: int):
        super().__init__(locator, timeout)
        self.root = Path("/", locator.container)
        self.directory = self.root / locator.object_path if locator.object_path else self.root

    @property
    def name(self) -> str:
        return str(self.directory)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        directory = self.directory.resolve()
        if path != directory and directory not in path.parents:
            raise ConfigurationError(f"object key escapes bucket directory: {key}", context={"key": key})
        return path

    def exists(self) -> bool:
        return self.directory.is_dir()

    def create(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransportError(
                f"there was a problem creating the bucket {self.name}",
                backend_message=str(e),
                context={"bucket": self.name},
            ) from e

    def write_all(self, key, data, content_type, metadata) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            attrs = {"content_type": content_type, "metadata": metadata}
            Path(str(path) + self.ATTRS_SUFFIX).write_text(json.dumps(attrs))
        except OSError as e:
            raise TransportError(
                f"failed to write to bucket {key}",
                backend_message=str(e),
                context={"bucket": self.name, "key": key},
            ) from e

    def read_all(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"failed to read {key}: no such object", context={"key": key}) from e
        except OSError as e:
            raise TransportError(f"failed to read {key}", backend_message=str(e), context={"key": key}) from e

    def attributes(self, key: str) -> Dict[str, object]:
        """사이드카 속성 (content_type, metadata)"""
        attrs_path = Path(str(self._path(key)) + self.ATTRS_SUFFIX)
        if not attrs_path.exists():
            raise NotFoundError(f"no attributes for {key}", context={"key": key})
        return json.loads(attrs_path.read_text())


@dataclass
class MemoryObject:
    data: bytes
    content_type: str
    metadata: Dict[str, str] = field(default_factory=dict)


# 같은 mem:// URL을 여러 번 열어도 같은 내용을 보도록 프로세스 단위로 보관
_MEMORY_BUCKETS: Dict[str, Dict[str, MemoryObject]] = {}


@register_backend("mem")
class MemoryBlobBucket(BlobBucket):
    """프로세스 메모리 blob 버킷"""

    def exists(self) -> bool:
        return self.name in _MEMORY_BUCKETS

    def create(self) -> None:
        _MEMORY_BUCKETS.setdefault(self.name, {})

    def write_all(self, key, data, content_type, metadata) -> None:
        objects = _MEMORY_BUCKETS.setdefault(self.name, {})
        objects[key] = MemoryObject(bytes(data), content_type, dict(metadata))

    def read_all(self, key: str) -> bytes:
        return self.get(key).data

    def get(self, key: str) -> MemoryObject:
        try:
            return _MEMORY_BUCKETS[self.name][key]
        except KeyError:
            raise NotFoundError(f"failed to read {key}: no such object", context={"bucket": self.name, "key": key}) from None

    @staticmethod
    def reset() -> None:
        _MEMORY_BUCKETS.clear()

