"""
Bucket Provider Factory

클러스터 설정으로 버킷 프로바이더 선택 (I/O 없음)
"""

from typing import Optional

from config import config
from core.logging_config import setup_logger
from storage.providers.base import ClusterStorageConfig, ProviderKind, StorageProvider
from storage.providers.blob_provider import GenericBlobProvider
from storage.providers.gcs_provider import GKEBucketProvider
from storage.providers.s3_provider import AmazonBucketProvider

logger = setup_logger(__name__)


def select_provider(cluster_config: Optional[ClusterStorageConfig]) -> Optional[StorageProvider]:
    """
    클러스터 프로바이더 종류에 맞는 버킷 프로바이더 선택

    Args:
        cluster_config: 클러스터 스토리지 설정 (None이면 레거시 모드)

    Returns:
        StorageProvider 또는 None (지원하지 않는 프로바이더)
    """
    if cluster_config is None:
        logger.warning("No cluster storage configuration found, falling back to the generic blob provider")
        return GenericBlobProvider()

    kind = cluster_config.provider_kind
    if kind in (ProviderKind.AWS, ProviderKind.EKS):
        return AmazonBucketProvider(cluster_config)
    if kind == ProviderKind.GKE:
        return GKEBucketProvider(cluster_config)
    if kind == ProviderKind.GENERIC:
        return GenericBlobProvider(classifier=cluster_config.classifier)

    logger.warning(f"No bucket provider available for cluster provider {kind.value!r}")
    return None


def load_cluster_storage_config() -> Optional[ClusterStorageConfig]:
    """설정에서 클러스터 스토리지 설정 로드. 프로바이더 종류가 없으면 None"""
    if not config.CLUSTER_PROVIDER:
        return None
    return ClusterStorageConfig(
        provider_kind=ProviderKind.parse(config.CLUSTER_PROVIDER),
        region=config.CLUSTER_REGION,
        classifier=config.STORAGE_CLASSIFIER,
    )


def new_bucket_provider_from_environment() -> Optional[StorageProvider]:
    """환경 설정 기반 버킷 프로바이더"""
    provider = select_provider(load_cluster_storage_config())
    logger.debug(f"Bucket provider obtained {provider!r}")
    return provider
