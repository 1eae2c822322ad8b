"""Visual SQL 쿼리 빌더 코어 패키지."""

__version__ = "0.1.0"
