"""
Bucket Collector

빌드 산출물(로그, 리포트, 파일)을 버킷에 저장하고 접근 URL을 반환
- glob 패턴 파일 수집
- 메모리 payload 수집
"""

from pathlib import Path
from typing import Iterable, List, Optional

from core.logging_config import setup_logger
from errors import (
    CollectionError,
    ConfigurationError,
    classify_error,
)
from storage.factory import new_bucket_provider_from_environment
from storage.helpers import iter_glob_files, object_name_for
from storage.providers.base import StorageProvider, DEFAULT_CLASSIFIER

logger = setup_logger(__name__)


class BucketCollector:
    """
    버킷 기반 수집기

    업로드는 패턴 순서, 패턴 안에서는 매칭 순서대로 하나씩 수행되므로
    반환되는 URL 순서가 결정적입니다.
    """

    def __init__(
        self,
        bucket_url: str,
        provider: Optional[StorageProvider],
    ):
        if provider is None:
            raise ConfigurationError(
                "no bucket provider is available for the cluster configuration",
                context={"bucket_url": bucket_url},
            )
        self.bucket_url = bucket_url
        self.provider = provider

    def collect_files(
        self,
        patterns: Iterable[str],
        output_path: str = "",
        base_dir: str = "",
    ) -> List[str]:
        """
        glob 패턴에 매칭되는 파일 업로드

        Args:
            patterns: glob 패턴 목록
            output_path: 오브젝트 이름 접두사
            base_dir: 오브젝트 이름에서 제거할 기준 디렉토리

        Returns:
            업로드된 오브젝트 URL 목록

        Raises:
            CollectionError: 파일 읽기/업로드 실패. 이미 업로드된 URL은 error.urls
        """
        urls: List[str] = []
        for pattern in patterns:
            for name in iter_glob_files(pattern):
                try:
                    to_name = object_name_for(name, output_path, base_dir)
                except ValueError as e:
                    raise self._collection_error(
                        f"failed to remove basedir {base_dir} from {name}", name, urls, e
                    ) from e

                try:
                    data = Path(name).read_bytes()
                except OSError as e:
                    raise self._collection_error(f"failed to read file {name}", name, urls, e) from e

                try:
                    url = self.provider.upload_file_to_bucket(data, to_name, self.bucket_url)
                except Exception as e:
                    # SDK 예외가 변환되지 않고 올라와도 부분 결과는 보존
                    raise self._collection_error(
                        f"failed to upload file {name}: {e}", name, urls, e
                    ) from e

                urls.append(url)
        logger.debug(f"Collected {len(urls)} files into {self.bucket_url}")
        return urls

    def collect_data(self, content: bytes, output_name: str) -> str:
        """
        메모리 payload 업로드

        Args:
            content: 저장할 내용
            output_name: 오브젝트 이름

        Returns:
            업로드된 오브젝트 URL
        """
        return self.provider.upload_file_to_bucket(content, output_name, self.bucket_url)

    def _collection_error(
        self,
        message: str,
        name: str,
        urls: List[str],
        cause: Exception,
    ) -> CollectionError:
        error = CollectionError(message, file_name=name, urls=urls, cause=cause)
        info = classify_error(cause, {"file_name": name}, include_traceback=False)
        logger.error(f"[{info.error_id}] {info.error_type.value}: {message}")
        return error


def new_collector(
    bucket_url: str,
    classifier: str = "",
    provider: Optional[StorageProvider] = None,
) -> BucketCollector:
    """
    스토리지 위치로 수집기 생성

    Args:
        bucket_url: 스토리지 위치의 버킷 URL
        classifier: 분류 태그 (비어 있으면 "default")
        provider: 사용할 프로바이더 (None이면 환경 설정으로 선택)

    Returns:
        BucketCollector
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    if provider is None:
        logger.debug("Attempting to get a bucket provider")
        provider = new_bucket_provider_from_environment()
    if provider is None:
        raise ConfigurationError(
            "error obtaining a bucket provider",
            context={"bucket_url": bucket_url},
        )

    provider.prepare(bucket_url, classifier)
    return BucketCollector(bucket_url, provider)
