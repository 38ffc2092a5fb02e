"""
설정 모듈
"""

from config.settings import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestConfig,
    config,
)

__all__ = [
    "Config",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestConfig",
    "config",
]
