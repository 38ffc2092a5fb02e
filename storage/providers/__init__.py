"""
Storage Providers

버킷 프로바이더 통합 모듈
- Amazon Provider (AWS/EKS, S3)
- GKE Provider (GCS)
- Generic Blob Provider (URL 스킴 기반)
"""

from storage.providers.base import (
    StorageProvider,
    ProviderKind,
    ClusterStorageConfig,
    UploadArtifact,
    DEFAULT_CLASSIFIER,
)
from storage.providers.s3_provider import AmazonBucketProvider
from storage.providers.gcs_provider import GKEBucketProvider
from storage.providers.blob_provider import GenericBlobProvider

__all__ = [
    "StorageProvider",
    "ProviderKind",
    "ClusterStorageConfig",
    "UploadArtifact",
    "DEFAULT_CLASSIFIER",
    "AmazonBucketProvider",
    "GKEBucketProvider",
    "GenericBlobProvider",
]
