"""쿼리 빌더 백엔드 HTTP API 클라이언트."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import httpx

from querybuilder.builder.alter_builder import AlterOperation
from querybuilder.core.config import Settings
from querybuilder.core.exceptions import ApiError
from querybuilder.core.models import TableSchema

logger = logging.getLogger(__name__)

RowId = Union[int, str]


@dataclass
class QueryResult:
    """/query.php 실행 결과."""

    rows: list[dict[str, Any]]
    row_count: int = 0
    execution_time_ms: float = 0.0
    is_explain: bool = False

    @property
    def columns(self) -> list[str]:
        return list(self.rows[0].keys()) if self.rows else []


@dataclass
class BrowseRequest:
    """/browse.php 페이지 조회 요청."""

    table: str
    page: int = 1
    limit: int = 25
    sort: Optional[str] = None
    order: str = "ASC"
    search: str = ""
    filters: dict[str, str] = field(default_factory=dict)

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"table": self.table, "page": self.page, "limit": self.limit}
        if self.sort:
            params["sort"] = self.sort
            params["order"] = self.order
        if self.search:
            params["search"] = self.search
        if self.filters:
            params["filters"] = json.dumps(self.filters)
        return params


@dataclass
class BrowsePage:
    """/browse.php 페이지 결과."""

    rows: list[dict[str, Any]]
    columns: list[Any] = field(default_factory=list)
    primary_key: list[str] = field(default_factory=list)
    total_rows: int = 0
    total_pages: int = 1
    page: int = 1


class QueryBuilderApiClient:
    """백엔드 API 클라이언트.

    재시도는 하지 않는다. {error: true} 응답은 ApiError로 변환한다.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        """클라이언트 초기화.

        Args:
            settings: 애플리케이션 설정
            http_client: 주입할 httpx 클라이언트 (테스트용)
        """
        self._settings = settings
        self._client = http_client or httpx.Client(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
        )

    def __enter__(self) -> "QueryBuilderApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _database_params(self, database: Optional[str] = None) -> dict[str, str]:
        database = database or self._settings.database
        return {"database": database} if database else {}

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """요청을 보내고 data 필드를 반환.

        Raises:
            ApiError: 전송 실패, JSON이 아닌 응답, 또는 error 응답
        """
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid response from server (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise ApiError("Unexpected response format", status_code=response.status_code)

        if body.get("error") or response.is_error:
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.warning("API error from %s: %s", url, message)
            raise ApiError(message, status_code=response.status_code)

        return body.get("data")

    def execute_query(self, sql: str) -> QueryResult:
        """SQL 실행 (/query.php)."""
        data = self._request("POST", "/query.php", json={"sql": sql}) or {}
        return QueryResult(
            rows=data.get("rows", []),
            row_count=data.get("row_count", len(data.get("rows", []))),
            execution_time_ms=data.get("execution_time_ms", 0.0),
            is_explain=data.get("is_explain", False),
        )

    def explain(self, sql: str) -> QueryResult:
        """EXPLAIN 실행."""
        data = self._request("POST", "/query.php", params={"explain": ""}, json={"sql": sql}) or {}
        return QueryResult(
            rows=data.get("rows", []),
            row_count=data.get("row_count", len(data.get("rows", []))),
            execution_time_ms=data.get("execution_time_ms", 0.0),
            is_explain=True,
        )

    def browse(self, request: BrowseRequest, database: Optional[str] = None) -> BrowsePage:
        """페이지 단위 테이블 조회 (/browse.php)."""
        params = {**request.to_params(), **self._database_params(database)}
        data = self._request("GET", "/browse.php", params=params) or {}
        return BrowsePage(
            rows=data.get("rows", []),
            columns=data.get("columns", []),
            primary_key=data.get("primary_key") or [],
            total_rows=data.get("total_rows", 0),
            total_pages=data.get("total_pages", 1),
            page=data.get("page", request.page),
        )

    def fetch_schema(self, table: str, database: Optional[str] = None) -> TableSchema:
        """테이블 스키마 조회 (/schema.php?table=)."""
        params = {"table": table, **self._database_params(database)}
        data = self._request("GET", "/schema.php", params=params) or {}
        data.setdefault("table", table)
        return TableSchema.from_api(data)

    def fetch_row(self, table: str, row_id: RowId) -> dict[str, Any]:
        params = {"table": table, "id": row_id, **self._database_params()}
        return self._request("GET", "/row.php", params=params) or {}

    def insert_row(self, table: str, data: dict[str, Any]) -> Any:
        payload = {"table": table, "data": data, **self._database_params()}
        return self._request("POST", "/row.php", json=payload)

    def update_row(self, table: str, row_id: RowId, data: dict[str, Any]) -> Any:
        payload = {"table": table, "id": row_id, "data": data, **self._database_params()}
        return self._request("PUT", "/row.php", json=payload)

    def delete_row(self, table: str, row_id: RowId) -> Any:
        params = {"table": table, "id": row_id, **self._database_params()}
        return self._request("DELETE", "/row.php", params=params)

    def alter(
        self,
        table: str,
        operations: list[AlterOperation],
        database: Optional[str] = None,
    ) -> Any:
        """ALTER 작업 목록을 한 번에 전송 (/alter.php).

        Args:
            table: 대상 테이블
            operations: 순서 있는 작업 목록
            database: 대상 데이터베이스 (없으면 설정값)

        Returns:
            응답 data
        """
        payload: dict[str, Any] = {
            "table": table,
            "operations": [op.to_payload() for op in operations],
            **self._database_params(database),
        }
        logger.info("Submitting %d ALTER operation(s) for %s", len(operations), table)
        return self._request("POST", "/alter.php", json=payload)
