"""
로깅 설정 및 유틸리티
"""

import sys
from loguru import logger
from config import config

_configured = False


def setup_logger(module_name: str = "artifact-storage"):
    """
    로거 설정

    프로세스당 한 번만 핸들러를 구성하고, 이후 호출은 같은 로거를 반환합니다.

    Args:
        module_name: 모듈 이름 (로그 파일명에 사용)
    """
    global _configured
    if _configured:
        return logger

    # 기본 핸들러 제거
    logger.remove()

    # 콘솔 출력 (INFO 이상)
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level="INFO" if not config.DEBUG else "DEBUG",
        colorize=True
    )

    if config.LOG_TO_FILE:
        # 파일 출력 (DEBUG 이상)
        log_file = config.LOGS_DIR / "artifact-storage.log"
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            compression="zip"
        )

        # 에러 로그 (ERROR 이상)
        error_log_file = config.LOGS_DIR / "artifact-storage_error.log"
        logger.add(
            error_log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="ERROR",
            rotation="10 MB",
            retention="90 days",
            compression="zip"
        )

    _configured = True
    return logger
