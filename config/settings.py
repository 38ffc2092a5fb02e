"""
아티팩트 스토리지 설정 관리

환경 변수 및 애플리케이션 설정을 관리합니다.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()


class Config:
    """애플리케이션 설정"""

    DEBUG = False
    TESTING = False

    # 프로젝트 경로
    BASE_DIR = Path(__file__).parent.parent
    LOGS_DIR = Path(os.getenv("LOGS_DIR", str(BASE_DIR / "logs")))
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "false").lower() == "true"

    # 클러스터 스토리지 설정 (요구사항 ConfigMap에서 내려오는 값)
    CLUSTER_PROVIDER: str = os.getenv("CLUSTER_PROVIDER", "")
    CLUSTER_REGION: str = os.getenv("CLUSTER_REGION", "")
    STORAGE_CLASSIFIER: str = os.getenv("STORAGE_CLASSIFIER", "default")
    STORAGE_BUCKET_URL: str = os.getenv("STORAGE_BUCKET_URL", "")

    # 네트워크 호출 타임아웃 (초)
    STORAGE_TIMEOUT_SEC: int = int(os.getenv("STORAGE_TIMEOUT_SEC", "20"))

    # 버킷 이름 최대 길이 (S3/GCS 공통 63자)
    BUCKET_NAME_MAX_LENGTH: int = 63

    # AWS 설정
    AWS_ACCESS_KEY_ID: Optional[str] = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")
    S3_ENDPOINT_URL: Optional[str] = os.getenv("S3_ENDPOINT_URL")  # LocalStack 등

    # GCP 설정
    GCP_PROJECT_ID: Optional[str] = os.getenv("GCP_PROJECT_ID")
    GCP_CREDENTIALS_PATH: Optional[str] = os.getenv("GCP_CREDENTIALS_PATH")

    # CloudFormation 스택 삭제 대기 설정
    STACK_DELETE_WAIT_DELAY_SEC: int = int(os.getenv("STACK_DELETE_WAIT_DELAY_SEC", "30"))
    STACK_DELETE_WAIT_MAX_ATTEMPTS: int = int(os.getenv("STACK_DELETE_WAIT_MAX_ATTEMPTS", "120"))

    @classmethod
    def ensure_directories(cls):
        """필수 디렉토리 생성"""
        if cls.LOG_TO_FILE:
            cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """개발 환경 설정"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """프로덕션 환경 설정"""
    DEBUG = False
    TESTING = False


class TestConfig(Config):
    """테스트 환경 설정"""
    DEBUG = True
    TESTING = True
    LOG_TO_FILE = False
    STORAGE_TIMEOUT_SEC = 5
    STACK_DELETE_WAIT_DELAY_SEC = 1
    STACK_DELETE_WAIT_MAX_ATTEMPTS = 2


# 환경별 설정 선택
_env = os.getenv("ENVIRONMENT", "development").lower()
if _env == "production":
    config = ProductionConfig()
elif _env == "test":
    config = TestConfig()
else:
    config = DevelopmentConfig()

# 디렉토리 생성
config.ensure_directories()
