"""애플리케이션 설정 모듈."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정."""

    # 백엔드 HTTP API 설정
    api_base_url: str = "http://localhost/api"
    api_timeout: float = 30.0
    database: Optional[str] = None

    # CREATE TABLE 기본 테이블 옵션
    default_engine: str = "InnoDB"
    default_charset: str = "utf8mb4"
    default_collation: str = "utf8mb4_unicode_ci"

    # 로깅 설정
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "QUERYBUILDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
