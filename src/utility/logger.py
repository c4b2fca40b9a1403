import sys

from loguru import logger


def setup_logger(level: str = "DEBUG"):
    """Loguru 기본 설정. 앱 시작 시(lifespan) 한 번 호출."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=level,
    )
    return logger
