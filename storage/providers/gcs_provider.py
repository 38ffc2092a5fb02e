"""
GCS Bucket Provider

google-cloud-storage 기반 GKE 클러스터용 GCS 통합
- 클러스터 전용 버킷 생성
- 바이트 업로드/다운로드
"""

import io
from typing import Optional

from google.cloud import storage

from config import config
from core.gcp import create_storage_client, gcs_call
from core.logging_config import setup_logger
from errors import ConfigurationError, NotFoundError
from storage.locator import BucketLocator
from storage.providers.base import (
    ClusterStorageConfig,
    StorageProvider,
    UploadArtifact,
    DEFAULT_CLASSIFIER,
)

logger = setup_logger(__name__)


class GKEBucketProvider(StorageProvider):
    """
    Google Cloud Storage Bucket Provider
    """

    def __init__(
        self,
        cluster_config: ClusterStorageConfig,
        project_id: Optional[str] = None,
        credentials_path: Optional[str] = None,
        timeout: Optional[int] = None,
        client=None,
    ):
        """
        GCS Provider 초기화 (네트워크 호출 없음)

        Args:
            cluster_config: 클러스터 스토리지 설정 (region 필수)
            project_id: GCP 프로젝트 ID (None이면 환경변수 사용)
            credentials_path: 서비스 계정 키 파일 경로
            timeout: 요청 타임아웃 (초)
            client: 미리 만든 storage.Client
        """
        self.cluster_config = cluster_config
        self.location = cluster_config.region
        self.classifier = cluster_config.classifier or DEFAULT_CLASSIFIER
        self.project_id = project_id or config.GCP_PROJECT_ID
        self.credentials_path = credentials_path or config.GCP_CREDENTIALS_PATH
        self.timeout = timeout or config.STORAGE_TIMEOUT_SEC
        self._client = client

    @property
    def client(self):
        """google.cloud.storage 클라이언트 (최초 사용 시 한 번 생성)"""
        if self._client is None:
            if not self.location:
                raise ConfigurationError(
                    "requirements do not specify a cluster region",
                    context={"provider": self.provider_name},
                )
            with gcs_call("failed to create the GCS client", project=self.project_id):
                return self._initialize_client(
                    lambda: create_storage_client(self.project_id, self.credentials_path)
                )
        return self._client

    @property
    def provider_name(self) -> str:
        return "gcs"

    @property
    def url_scheme(self) -> str:
        return "gs"

    def prepare(self, bucket_url: str, classifier: str = "") -> None:
        if classifier and not self.cluster_config.classifier:
            self.classifier = classifier

    def ensure_bucket_is_created(self, bucket_url: str) -> None:
        """버킷 존재 확인 후 없을 때만 생성"""
        client = self.client
        bucket_name = BucketLocator.parse(bucket_url).container

        try:
            with gcs_call(f"failed to check if {bucket_name} bucket exists already", bucket=bucket_name):
                client.get_bucket(bucket_name, timeout=self.timeout, retry=None)
            logger.debug(f"Bucket {bucket_name} already exists")
            return
        except NotFoundError:
            logger.info(f"The bucket {bucket_url} does not exist so lets create it")

        with gcs_call(
            f"there was a problem creating the bucket {bucket_name} in GCP",
            bucket=bucket_name,
            region=self.location,
        ):
            bucket = storage.Bucket(client, name=bucket_name)
            bucket.storage_class = "STANDARD"
            client.create_bucket(
                bucket,
                location=self.location,
                timeout=self.timeout,
                retry=None,
            )
        logger.info(f"Created bucket {bucket_name} in {self.location}")

    def upload_file_to_bucket(
        self,
        content: bytes,
        object_name: str,
        bucket_url: str,
    ) -> str:
        """바이트 업로드"""
        locator = BucketLocator.parse(bucket_url)
        artifact = UploadArtifact.for_payload(content, object_name, self.classifier)
        key = locator.key_for(artifact.name)

        with gcs_call(f"failed to write to bucket {key}", bucket=locator.container, key=key):
            blob = self.client.bucket(locator.container).blob(key)
            blob.metadata = artifact.metadata
            blob.upload_from_string(
                artifact.content,
                content_type=artifact.content_type,
                timeout=self.timeout,
                retry=None,
            )

        uri = self.get_uri(locator.container, key)
        logger.debug(f"The file was uploaded successfully, location: {uri}")
        return uri

    def download_file_from_bucket(self, bucket_url: str) -> io.BytesIO:
        """오브젝트를 메모리로 다운로드"""
        locator = BucketLocator.parse(bucket_url)
        if not locator.object_path:
            raise NotFoundError(f"no object path in {bucket_url}", context={"bucket_url": bucket_url})

        with gcs_call(
            f"failed to download {bucket_url}",
            bucket=locator.container,
            key=locator.object_path,
        ):
            blob = self.client.bucket(locator.container).blob(locator.object_path)
            data = blob.download_as_bytes(timeout=self.timeout, retry=None)

        return io.BytesIO(data)
