"""
Generic Blob Bucket Provider

URL 스킴으로 백엔드를 고르는 blob 추상화 기반 프로바이더.
네이티브 구현이 없는 백엔드와 클러스터 설정이 없는 레거시 배포에 사용됩니다.
"""

import io
from contextlib import contextmanager
from typing import Iterator, Optional

from config import config
from core.logging_config import setup_logger
from errors import ConfigurationError, NotFoundError, NotInitializedError
from storage.blob import BlobBucket, open_bucket
from storage.locator import BucketLocator, PATH_ONLY_SCHEMES
from storage.providers.base import (
    StorageProvider,
    UploadArtifact,
    DEFAULT_CLASSIFIER,
)

logger = setup_logger(__name__)


class GenericBlobProvider(StorageProvider):
    """
    다중 백엔드 blob 프로바이더

    사용 전에 initialize(bucket_url, classifier)를 한 번 호출해야 합니다.
    """

    def __init__(self, classifier: str = "", timeout: Optional[int] = None):
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self.timeout = timeout or config.STORAGE_TIMEOUT_SEC
        self._bucket_url: Optional[str] = None
        self._bucket: Optional[BlobBucket] = None
        self._initializing = False

    @property
    def provider_name(self) -> str:
        return "blob"

    @property
    def initialized(self) -> bool:
        return self._bucket is not None

    @property
    def bucket_url(self) -> Optional[str]:
        return self._bucket_url

    @property
    def url_scheme(self) -> str:
        return self._require_bucket().locator.scheme

    def initialize(self, bucket_url: str, classifier: str = "") -> None:
        """
        기본 버킷 열기 (한 번만)

        Args:
            bucket_url: 스토리지 위치의 버킷 URL
            classifier: 오브젝트 메타데이터에 붙일 분류 태그
        """
        if self._initializing:
            raise ConfigurationError("GenericBlobProvider initialization is already in progress")
        if self._bucket is not None:
            if bucket_url == self._bucket_url:
                return
            raise ConfigurationError(
                f"GenericBlobProvider is already initialized with bucket {self._bucket_url}",
                context={"bucket_url": bucket_url},
            )

        logger.warning(f"Calling GenericBlobProvider with bucketURL {bucket_url}, classifier: {classifier}")
        if not bucket_url:
            raise ConfigurationError("no BucketURL is configured for the storage location in the TeamSettings")

        self._initializing = True
        try:
            bucket = open_bucket(bucket_url, self.timeout)
        finally:
            self._initializing = False

        self._bucket = bucket
        self._bucket_url = bucket_url
        if classifier:
            self.classifier = classifier

    def prepare(self, bucket_url: str, classifier: str = "") -> None:
        self.initialize(bucket_url, classifier)

    def _require_bucket(self) -> BlobBucket:
        if self._bucket is None:
            raise NotInitializedError(
                "GenericBlobProvider must be initialized with a bucket URL before use",
                context={"provider": self.provider_name},
            )
        return self._bucket

    @contextmanager
    def _open(self, bucket_url: str) -> Iterator[BlobBucket]:
        """
        bucket_url의 blob 버킷

        초기화된 버킷은 재사용하고, 다른 URL로 연 버킷은 사용 후 닫습니다.
        """
        bucket = self._require_bucket()
        if bucket_url == self._bucket_url:
            yield bucket
            return

        other = open_bucket(bucket_url, self.timeout)
        try:
            yield other
        finally:
            other.close()

    def create_new_bucket_for_cluster(self, cluster_name: str, bucket_kind: str) -> str:
        """클러스터 전용 버킷 생성 (경로만 갖는 스킴은 지원하지 않음)"""
        scheme = self.url_scheme
        if scheme in PATH_ONLY_SCHEMES:
            raise ConfigurationError(
                f"cannot create a cluster bucket for the {scheme!r} scheme",
                context={"bucket_url": self._bucket_url, "cluster_name": cluster_name},
            )
        return super().create_new_bucket_for_cluster(cluster_name, bucket_kind)

    def ensure_bucket_is_created(self, bucket_url: str) -> None:
        """버킷 존재 확인 후 없을 때만 생성"""
        with self._open(bucket_url) as bucket:
            if bucket.exists():
                logger.debug(f"Bucket {bucket.name} already exists")
                return
            logger.info(f"The bucket {bucket_url} does not exist so lets create it")
            bucket.create()

    def upload_file_to_bucket(
        self,
        content: bytes,
        object_name: str,
        bucket_url: str,
    ) -> str:
        """바이트 업로드"""
        locator = BucketLocator.parse(bucket_url).join(object_name)
        artifact = UploadArtifact.for_payload(content, object_name, self.classifier)

        with self._open(bucket_url) as bucket:
            bucket.write_all(
                locator.object_path,
                artifact.content,
                content_type=artifact.content_type,
                metadata=artifact.metadata,
            )
        return locator.url

    def download_file_from_bucket(self, bucket_url: str) -> io.BytesIO:
        """오브젝트를 메모리로 다운로드"""
        locator = BucketLocator.parse(bucket_url)
        if not locator.object_path:
            raise NotFoundError(f"no object path in {bucket_url}", context={"bucket_url": bucket_url})
        with self._open(locator.root) as bucket:
            return io.BytesIO(bucket.read_all(locator.object_path))

    def close(self) -> None:
        if self._bucket is not None:
            self._bucket.close()
