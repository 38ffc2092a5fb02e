"""
Storage Provider Base Interface

버킷 프로바이더 공통 인터페이스 및 클러스터 스토리지 설정
"""

import io
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from config import config
from core.logging_config import setup_logger
from errors import ArtifactStorageError, ConfigurationError
from storage.helpers import content_type_for_file_name
from storage.locator import SCHEME_DELIMITER

logger = setup_logger(__name__)

DEFAULT_CLASSIFIER = "default"
CLASSIFICATION_METADATA_KEY = "classification"


class ProviderKind(str, Enum):
    """클러스터 프로바이더 종류"""
    AWS = "aws"
    EKS = "eks"
    GKE = "gke"
    GENERIC = "generic"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProviderKind":
        """대소문자 무시 파싱, 모르는 값은 UNKNOWN"""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ClusterStorageConfig:
    """클러스터 스토리지 설정 (읽기 전용)"""
    provider_kind: ProviderKind
    region: str = ""
    classifier: str = ""


@dataclass
class UploadArtifact:
    """업로드 한 건의 내용과 메타데이터"""
    name: str
    content: bytes
    content_type: str
    classification_tag: str = DEFAULT_CLASSIFIER

    @classmethod
    def for_payload(cls, content: bytes, name: str, classifier: str) -> "UploadArtifact":
        return cls(
            name=name,
            content=content,
            content_type=content_type_for_file_name(name),
            classification_tag=classifier or DEFAULT_CLASSIFIER,
        )

    @property
    def metadata(self):
        return {CLASSIFICATION_METADATA_KEY: self.classification_tag}


class StorageProvider(ABC):
    """
    버킷 프로바이더 추상 인터페이스

    CLI 명령과 CI 파이프라인이 의존하는 유일한 계약입니다. 백엔드 클라이언트는
    첫 호출 시 한 번만 생성되며 오브젝트 내용은 캐시하지 않습니다.
    """

    max_bucket_name_length: int = config.BUCKET_NAME_MAX_LENGTH
    bucket_name_separator: str = "-"

    _client = None
    _client_initializing: bool = False

    def _initialize_client(self, factory: Callable[[], Any]) -> Any:
        """
        백엔드 클라이언트를 한 번만 생성

        생성 중 다시 호출되면 ConfigurationError. 생성이 실패하면 다음 호출에서
        다시 시도할 수 있습니다.
        """
        if self._client is not None:
            return self._client
        if self._client_initializing:
            raise ConfigurationError(
                f"{self.provider_name} client initialization is already in progress",
                context={"provider": self.provider_name},
            )

        self._client_initializing = True
        try:
            client = factory()
        finally:
            self._client_initializing = False

        self._client = client
        logger.debug(f"Initialized {self.provider_name} client")
        return client

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """제공자 이름 (s3, gcs, blob)"""
        pass

    @property
    @abstractmethod
    def url_scheme(self) -> str:
        """새 버킷 URL에 사용할 스킴"""
        pass

    @abstractmethod
    def ensure_bucket_is_created(self, bucket_url: str) -> None:
        """
        버킷이 없을 때만 생성 (멱등)

        Args:
            bucket_url: scheme://bucket 형식 URL
        """
        pass

    @abstractmethod
    def upload_file_to_bucket(
        self,
        content: bytes,
        object_name: str,
        bucket_url: str,
    ) -> str:
        """
        바이트 업로드

        Args:
            content: 업로드할 내용
            object_name: 버킷 내 오브젝트 이름
            bucket_url: 대상 버킷 URL

        Returns:
            scheme://bucket/object_name 형식 URL
        """
        pass

    @abstractmethod
    def download_file_from_bucket(self, bucket_url: str) -> io.BytesIO:
        """
        오브젝트 전체를 메모리로 읽어 줄 단위로 읽을 수 있는 스트림 반환

        Args:
            bucket_url: scheme://bucket/path 형식 URL
        """
        pass

    def prepare(self, bucket_url: str, classifier: str = "") -> None:
        """수집기 구성 시 한 번 호출되는 훅 (기본: 아무 것도 안 함)"""
        pass

    def create_new_bucket_for_cluster(self, cluster_name: str, bucket_kind: str) -> str:
        """
        클러스터 전용 버킷 생성

        실패해도 예외의 context["bucket_url"]에 후보 URL이 남으므로
        호출자는 같은 URL로 멱등하게 재시도할 수 있습니다.

        Args:
            cluster_name: 클러스터 이름
            bucket_kind: 버킷 용도 (logs, reports 등)

        Returns:
            생성된 버킷 URL
        """
        bucket_name = self.generate_bucket_name(cluster_name, bucket_kind)
        bucket_url = f"{self.url_scheme}{SCHEME_DELIMITER}{bucket_name}"
        try:
            self.ensure_bucket_is_created(bucket_url)
        except ArtifactStorageError as e:
            e.context.setdefault("bucket_url", bucket_url)
            raise
        return bucket_url

    def generate_bucket_name(self, cluster_name: str, bucket_kind: str) -> str:
        """길이 제한에 맞춘 고유 버킷 이름"""
        if not cluster_name:
            raise ConfigurationError("cluster name is required to create a bucket")
        sep = self.bucket_name_separator
        parts = [cluster_name, bucket_kind, str(uuid.uuid4())]
        bucket_name = sep.join(p for p in parts if p)

        if len(bucket_name) > self.max_bucket_name_length:
            bucket_name = bucket_name[:self.max_bucket_name_length]
        return bucket_name.rstrip(sep)

    def get_uri(self, bucket: str, key: str) -> str:
        """URI 생성"""
        return f"{self.url_scheme}{SCHEME_DELIMITER}{bucket}/{key}"
