"""
테스트 설정 및 픽스처
"""

import os
import pytest
from unittest.mock import MagicMock

# 테스트 환경 설정 - 모든 import 이전에 설정
os.environ["ENVIRONMENT"] = "test"

from storage.blob import MemoryBlobBucket
from storage.providers.base import ClusterStorageConfig, ProviderKind


@pytest.fixture(autouse=True)
def reset_memory_buckets():
    """mem:// 버킷 내용 초기화 (각 테스트마다)"""
    MemoryBlobBucket.reset()
    yield
    MemoryBlobBucket.reset()


@pytest.fixture
def eks_config():
    """EKS 클러스터 스토리지 설정"""
    return ClusterStorageConfig(
        provider_kind=ProviderKind.EKS,
        region="us-west-2",
        classifier="",
    )


@pytest.fixture
def gke_config():
    """GKE 클러스터 스토리지 설정"""
    return ClusterStorageConfig(
        provider_kind=ProviderKind.GKE,
        region="us-central1",
        classifier="",
    )


@pytest.fixture
def mock_s3_client():
    """boto3 S3 클라이언트 목"""
    return MagicMock()


@pytest.fixture
def artifacts_dir(tmp_path):
    """수집 대상 빌드 산출물 디렉토리"""
    base = tmp_path / "workspace"
    (base / "reports").mkdir(parents=True)
    (base / "example.txt").write_text("hello world\n")
    (base / "reports" / "junit.xml").write_text("<testsuite/>")
    (base / "reports" / "coverage.html").write_text("<html></html>")
    return base
