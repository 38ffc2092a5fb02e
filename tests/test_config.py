"""
설정 파일 테스트

config 모듈의 설정 관리 기능을 테스트합니다.
"""

import pytest
from pathlib import Path


def test_config_module_import():
    """config 모듈 import 가능 확인"""
    from config import config, Config
    assert config is not None
    assert Config is not None


def test_config_has_required_attributes():
    """필수 설정 속성 존재 확인"""
    from config import config

    required_attrs = [
        'BASE_DIR',
        'LOGS_DIR',
        'CLUSTER_PROVIDER',
        'CLUSTER_REGION',
        'STORAGE_CLASSIFIER',
        'STORAGE_BUCKET_URL',
        'STORAGE_TIMEOUT_SEC',
        'BUCKET_NAME_MAX_LENGTH',
        'AWS_REGION',
        'STACK_DELETE_WAIT_DELAY_SEC',
        'STACK_DELETE_WAIT_MAX_ATTEMPTS',
    ]

    for attr in required_attrs:
        assert hasattr(config, attr), f"설정 속성 누락: {attr}"


def test_config_paths_are_pathlib():
    """설정 경로가 pathlib.Path 타입인지 확인"""
    from config import config

    for attr in ['BASE_DIR', 'LOGS_DIR']:
        value = getattr(config, attr)
        assert isinstance(value, Path), f"{attr}가 Path 타입이 아닙니다: {type(value)}"


def test_config_numeric_values():
    """숫자 설정값 타입 및 범위 확인"""
    from config import config

    assert isinstance(config.STORAGE_TIMEOUT_SEC, int)
    assert config.STORAGE_TIMEOUT_SEC > 0, "STORAGE_TIMEOUT_SEC는 양수여야 합니다"

    assert config.BUCKET_NAME_MAX_LENGTH == 63

    assert isinstance(config.STACK_DELETE_WAIT_DELAY_SEC, int)
    assert config.STACK_DELETE_WAIT_DELAY_SEC > 0

    assert isinstance(config.STACK_DELETE_WAIT_MAX_ATTEMPTS, int)
    assert config.STACK_DELETE_WAIT_MAX_ATTEMPTS > 0


def test_config_boolean_values():
    """불린 설정값 확인"""
    from config import config

    for attr in ['DEBUG', 'TESTING', 'LOG_TO_FILE']:
        value = getattr(config, attr)
        assert isinstance(value, bool), f"{attr}가 bool 타입이 아닙니다: {type(value)}"


def test_config_environment_selection():
    """환경별 설정 클래스 선택 확인"""
    from config.settings import Config, DevelopmentConfig, ProductionConfig, TestConfig

    assert issubclass(DevelopmentConfig, Config)
    assert issubclass(ProductionConfig, Config)
    assert issubclass(TestConfig, Config)


def test_active_config_is_test():
    """conftest에서 ENVIRONMENT=test 설정"""
    from config import config
    from config.settings import TestConfig

    assert isinstance(config, TestConfig)


def test_development_config_settings():
    """개발 환경 설정 확인"""
    from config.settings import DevelopmentConfig

    config = DevelopmentConfig()
    assert config.DEBUG is True
    assert config.TESTING is False


def test_production_config_settings():
    """프로덕션 환경 설정 확인"""
    from config.settings import ProductionConfig

    config = ProductionConfig()
    assert config.DEBUG is False
    assert config.TESTING is False


def test_test_config_settings():
    """테스트 환경 설정 확인"""
    from config.settings import TestConfig

    config = TestConfig()
    assert config.DEBUG is True
    assert config.TESTING is True
    assert config.LOG_TO_FILE is False
    assert config.STORAGE_TIMEOUT_SEC < 20


def test_settings_file_structure():
    """settings.py 파일 구조 확인"""
    project_root = Path(__file__).parent.parent
    settings_file = project_root / "config" / "settings.py"

    assert settings_file.exists()

    content = settings_file.read_text(encoding='utf-8')

    # 필수 import 확인
    assert 'from dotenv import load_dotenv' in content
    assert 'from pathlib import Path' in content

    # 클래스 정의 확인
    assert 'class Config:' in content
    assert 'class DevelopmentConfig' in content
    assert 'class ProductionConfig' in content
    assert 'class TestConfig' in content


def test_env_example_has_required_variables():
    """.env.example 파일에 필수 환경 변수 포함 확인"""
    project_root = Path(__file__).parent.parent
    env_example = project_root / ".env.example"

    assert env_example.exists()
    content = env_example.read_text(encoding='utf-8')

    required_vars = [
        'CLUSTER_PROVIDER',
        'CLUSTER_REGION',
        'STORAGE_CLASSIFIER',
        'STORAGE_TIMEOUT_SEC',
        'AWS_ACCESS_KEY_ID',
        'AWS_SECRET_ACCESS_KEY',
        'GCP_PROJECT_ID',
        'STACK_DELETE_WAIT_DELAY_SEC',
    ]

    for var in required_vars:
        assert var in content, f"환경 변수 누락: {var}"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
