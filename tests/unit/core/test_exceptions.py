"""예외 모듈 테스트."""

import logging

import pytest

from querybuilder.core.config import Settings
from querybuilder.core.exceptions import ApiError, QueryBuilderError, ValidationError
from querybuilder.core.log_config import configure_logging


class TestApiError:
    """ApiError 메시지 처리 테스트."""

    def test_strips_database_error_prefix(self) -> None:
        """'Database error:' 접두사를 제거해야 함."""
        error = ApiError("Database error: Unknown column 'foo'", status_code=400)

        assert str(error) == "Unknown column 'foo'"
        assert error.raw_message == "Database error: Unknown column 'foo'"
        assert error.status_code == 400

    def test_prefix_match_is_case_insensitive(self) -> None:
        """접두사는 대소문자와 무관하게 제거되어야 함."""
        assert ApiError.clean_message("DATABASE ERROR:   Table missing") == "Table missing"

    def test_keeps_other_messages_verbatim(self) -> None:
        """다른 메시지는 그대로 유지해야 함."""
        error = ApiError("Duplicate entry '1' for key 'PRIMARY'")

        assert str(error) == "Duplicate entry '1' for key 'PRIMARY'"
        assert error.status_code is None

    def test_hierarchy(self) -> None:
        """모든 예외는 QueryBuilderError를 상속해야 함."""
        assert issubclass(ApiError, QueryBuilderError)
        assert issubclass(ValidationError, QueryBuilderError)

        with pytest.raises(QueryBuilderError):
            raise ValidationError("Column name is required")


class TestConfigureLogging:
    """로깅 설정 테스트."""

    def test_uses_configured_level(self, monkeypatch) -> None:
        """설정된 레벨로 basicConfig를 호출해야 함."""
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        configure_logging(Settings(log_level="debug"))

        assert calls["level"] == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch) -> None:
        """알 수 없는 레벨은 INFO로 처리해야 함."""
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

        configure_logging(Settings(log_level="verbose"))

        assert calls["level"] == logging.INFO
