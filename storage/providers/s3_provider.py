"""
AWS S3 Bucket Provider

boto3 기반 S3 통합
- 클러스터 전용 버킷 생성
- us-east-1 LocationConstraint 처리
- 바이트 업로드/다운로드
"""

import io
from typing import Optional

from config import config
from core.aws import aws_call, create_bucket_params, create_client
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


class AmazonBucketProvider(StorageProvider):
    """
    AWS/EKS 클러스터용 S3 Bucket Provider
    """

    def __init__(
        self,
        cluster_config: ClusterStorageConfig,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        timeout: Optional[int] = None,
        client=None,
    ):
        """
        S3 Provider 초기화 (네트워크 호출 없음)

        Args:
            cluster_config: 클러스터 스토리지 설정 (region 필수)
            access_key_id: AWS Access Key (None이면 환경변수/IAM 사용)
            secret_access_key: AWS Secret Key
            endpoint_url: 커스텀 엔드포인트 (LocalStack 등)
            timeout: 호출별 타임아웃 (초)
            client: 미리 만든 boto3 S3 클라이언트
        """
        self.cluster_config = cluster_config
        self.region = cluster_config.region
        self.classifier = cluster_config.classifier or DEFAULT_CLASSIFIER
        self.access_key_id = access_key_id or config.AWS_ACCESS_KEY_ID
        self.secret_access_key = secret_access_key or config.AWS_SECRET_ACCESS_KEY
        self.endpoint_url = endpoint_url or config.S3_ENDPOINT_URL
        self.timeout = timeout or config.STORAGE_TIMEOUT_SEC
        self._client = client

    @property
    def client(self):
        """boto3 S3 클라이언트 (최초 사용 시 한 번 생성)"""
        if self._client is None:
            if not self.region:
                raise ConfigurationError(
                    "requirements do not specify a cluster region",
                    context={"provider": self.provider_name},
                )
            with aws_call("failed to create the S3 client", region=self.region):
                return self._initialize_client(lambda: create_client(
                    "s3",
                    region=self.region,
                    timeout=self.timeout,
                    access_key_id=self.access_key_id,
                    secret_access_key=self.secret_access_key,
                    endpoint_url=self.endpoint_url,
                ))
        return self._client

    @property
    def provider_name(self) -> str:
        return "s3"

    @property
    def url_scheme(self) -> str:
        return "s3"

    def prepare(self, bucket_url: str, classifier: str = "") -> None:
        if classifier and not self.cluster_config.classifier:
            self.classifier = classifier

    def ensure_bucket_is_created(self, bucket_url: str) -> None:
        """버킷 존재 확인 후 없을 때만 생성"""
        client = self.client
        bucket_name = BucketLocator.parse(bucket_url).container

        try:
            with aws_call(f"failed to check if {bucket_name} bucket exists already", bucket=bucket_name):
                client.head_bucket(Bucket=bucket_name)
            logger.debug(f"Bucket {bucket_name} already exists")
            return
        except NotFoundError:
            logger.info(f"The bucket {bucket_url} does not exist so lets create it")

        with aws_call(
            f"there was a problem creating the bucket {bucket_name} in AWS",
            bucket=bucket_name,
            region=self.region,
        ):
            client.create_bucket(**create_bucket_params(bucket_name, self.region))
        logger.info(f"Created bucket {bucket_name} in {self.region}")

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

        with aws_call(f"failed to write to bucket {key}", bucket=locator.container, key=key):
            self.client.put_object(
                Bucket=locator.container,
                Key=key,
                Body=artifact.content,
                ContentType=artifact.content_type,
                Metadata=artifact.metadata,
            )

        uri = self.get_uri(locator.container, key)
        logger.debug(f"The file was uploaded successfully, location: {uri}")
        return uri

    def download_file_from_bucket(self, bucket_url: str) -> io.BytesIO:
        """오브젝트를 메모리로 다운로드"""
        locator = BucketLocator.parse(bucket_url)
        if not locator.object_path:
            raise NotFoundError(f"no object path in {bucket_url}", context={"bucket_url": bucket_url})

        with aws_call(
            f"failed to download {bucket_url}",
            bucket=locator.container,
            key=locator.object_path,
        ):
            response = self.client.get_object(Bucket=locator.container, Key=locator.object_path)
            body = response["Body"]
            try:
                data = body.read()
            finally:
                body.close()

        return io.BytesIO(data)
