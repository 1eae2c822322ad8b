"""빌더 공통 베이스."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# SQL 변경 콜백 타입 (미리보기 패널 등)
SqlChangeCallback = Callable[[str], None]


class StatementBuilder:
    """상태가 바뀔 때마다 SQL을 다시 만들어 콜백에 넘기는 빌더의 베이스."""

    def __init__(self, on_sql_change: Optional[SqlChangeCallback] = None) -> None:
        self._on_sql_change = on_sql_change

    def build_sql(self) -> str:
        raise NotImplementedError

    def update_sql(self) -> None:
        """현재 상태로 SQL을 다시 만들어 콜백에 전달."""
        if self._on_sql_change:
            sql = self.build_sql()
            logger.debug("%s SQL changed: %s", type(self).__name__, sql)
            self._on_sql_change(sql)

    def get_sql(self) -> str:
        return self.build_sql()
