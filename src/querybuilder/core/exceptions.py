"""쿼리 빌더 예외 정의."""


class QueryBuilderError(Exception):
    """쿼리 빌더 기본 예외."""

    pass


class ValidationError(QueryBuilderError):
    """필수 입력 누락 등 로컬 검증 실패.

    SQL/작업 생성을 중단시키며, 호출자가 사용자 메시지로 표시한다.
    """

    pass


class ApiError(QueryBuilderError):
    """백엔드 API가 반환한 에러."""

    DATABASE_ERROR_PREFIX = "database error:"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """예외 초기화.

        Args:
            message: 백엔드 에러 메시지 (원문)
            status_code: HTTP 상태 코드
        """
        super().__init__(self.clean_message(message))
        self.raw_message = message
        self.status_code = status_code

    @classmethod
    def clean_message(cls, message: str) -> str:
        """일반적인 "Database error:" 접두사를 제거한다.

        Args:
            message: 원본 메시지

        Returns:
            표시용 메시지
        """
        stripped = message.strip()
        if stripped.lower().startswith(cls.DATABASE_ERROR_PREFIX):
            return stripped[len(cls.DATABASE_ERROR_PREFIX):].lstrip()
        return stripped
