"""로깅 설정."""

import logging

from querybuilder.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """설정된 레벨로 루트 로거를 구성한다.

    Args:
        settings: 애플리케이션 설정
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
