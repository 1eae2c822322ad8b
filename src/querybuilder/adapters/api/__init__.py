"""백엔드 API 어댑터 모듈."""

from querybuilder.adapters.api.client import (
    BrowsePage,
    BrowseRequest,
    QueryBuilderApiClient,
    QueryResult,
)

__all__ = ["BrowsePage", "BrowseRequest", "QueryBuilderApiClient", "QueryResult"]
