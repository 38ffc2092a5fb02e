"""
Artifact Storage

빌드 산출물 저장 계층
- 버킷 프로바이더 (S3, GCS, 범용 blob)
- 프로바이더 선택
- 수집기
"""

from storage.locator import BucketLocator
from storage.factory import select_provider, new_bucket_provider_from_environment
from storage.collector import BucketCollector, new_collector

__all__ = [
    "BucketLocator",
    "select_provider",
    "new_bucket_provider_from_environment",
    "BucketCollector",
    "new_collector",
]
