"""SELECT 조립기."""

from typing import Optional

from querybuilder.builder.base import SqlChangeCallback, StatementBuilder
from querybuilder.builder.conditions import WhereClauseBuilder
from querybuilder.core.models import (
    Condition,
    JoinSpec,
    OrderBy,
)

NO_TABLE_PLACEHOLDER = "SELECT * FROM table_name;"


def build_select(
    tables: list[str],
    columns_by_table: dict[str, list[str]],
    joins: list[JoinSpec],
    conditions: list[Condition],
    group_by: list[str],
    order_by: list[OrderBy],
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> str:
    """SELECT 문을 조립한다.

    Args:
        tables: 선택 순서대로의 테이블 (첫 번째가 FROM 대상)
        columns_by_table: 테이블별 선택 컬럼 (비어 있으면 table.*)
        joins: JOIN 명세 목록 (컬럼이 빠진 JOIN은 건너뜀)
        conditions: WHERE 조건 목록
        group_by: GROUP BY 컬럼
        order_by: ORDER BY 항목
        limit: LIMIT 값
        offset: OFFSET 값 (LIMIT이 있을 때만 출력)

    Returns:
        세미콜론으로 끝나는 SELECT 문
    """
    if not tables:
        return NO_TABLE_PLACEHOLDER

    columns = []
    for table in tables:
        selected = columns_by_table.get(table) or []
        if not selected:
            columns.append(f"{table}.*")
        else:
            columns.extend(f"{table}.{col}" for col in selected)

    lines = [f"SELECT {', '.join(columns) or '*'}", f"FROM {tables[0]}"]

    for join in joins:
        if join.is_complete:
            lines.append(
                f"{join.type.value} JOIN {join.right_table} ON "
                f"{join.left_table}.{join.left_column} = {join.right_table}.{join.right_column}"
            )

    where = WhereClauseBuilder().render(conditions)
    if where:
        lines.append(f"WHERE {where}")

    if group_by:
        lines.append(f"GROUP BY {', '.join(group_by)}")

    valid_order_by = [o for o in order_by if o.column]
    if valid_order_by:
        lines.append(
            "ORDER BY " + ", ".join(f"{o.column} {o.direction.value}" for o in valid_order_by)
        )

    if limit:
        limit_line = f"LIMIT {limit}"
        if offset:
            limit_line += f" OFFSET {offset}"
        lines.append(limit_line)

    return "\n".join(lines) + ";"


class SelectBuilder(StatementBuilder):
    """UI 상태를 보관하는 SELECT 빌더."""

    def __init__(self, on_sql_change: Optional[SqlChangeCallback] = None) -> None:
        super().__init__(on_sql_change)
        self.tables: list[str] = []
        self.columns_by_table: dict[str, list[str]] = {}
        self.joins: list[JoinSpec] = []
        self.conditions: list[Condition] = []
        self.group_by: list[str] = []
        self.order_by: list[OrderBy] = []
        self.limit: Optional[int] = None
        self.offset: Optional[int] = None

    def add_table(self, table: str) -> None:
        if table not in self.tables:
            self.tables.append(table)
            self.columns_by_table.setdefault(table, [])
        self.update_sql()

    def remove_table(self, table: str) -> None:
        """테이블과 그 컬럼 선택, 관련 JOIN을 함께 제거."""
        if table in self.tables:
            self.tables.remove(table)
        self.columns_by_table.pop(table, None)
        self.joins = [
            j for j in self.joins if table not in (j.left_table, j.right_table)
        ]
        self.update_sql()

    def toggle_column(self, table: str, column: str) -> None:
        selected = self.columns_by_table.setdefault(table, [])
        if column in selected:
            selected.remove(column)
        else:
            selected.append(column)
        self.update_sql()

    def add_join(self, join: JoinSpec) -> None:
        self.joins.append(join)
        self.update_sql()

    def remove_join(self, index: int) -> None:
        del self.joins[index]
        self.update_sql()

    def add_condition(self, condition: Condition) -> None:
        self.conditions.append(condition)
        self.update_sql()

    def update_condition(self, index: int, **changes: object) -> None:
        """조건의 필드 일부를 변경 (column, operator, value, connector)."""
        condition = self.conditions[index]
        for name, value in changes.items():
            if not hasattr(condition, name):
                raise AttributeError(f"Condition has no field '{name}'")
            setattr(condition, name, value)
        self.update_sql()

    def remove_condition(self, index: int) -> None:
        del self.conditions[index]
        self.update_sql()

    def set_group_by(self, columns: list[str]) -> None:
        self.group_by = list(columns)
        self.update_sql()

    def add_order_by(self, order_by: OrderBy) -> None:
        self.order_by.append(order_by)
        self.update_sql()

    def remove_order_by(self, index: int) -> None:
        del self.order_by[index]
        self.update_sql()

    def set_limit(self, limit: Optional[int]) -> None:
        self.limit = limit
        self.update_sql()

    def set_offset(self, offset: Optional[int]) -> None:
        self.offset = offset
        self.update_sql()

    def clear(self) -> None:
        """모든 상태를 초기화."""
        self.tables = []
        self.columns_by_table = {}
        self.joins = []
        self.conditions = []
        self.group_by = []
        self.order_by = []
        self.limit = None
        self.offset = None
        self.update_sql()

    def build_sql(self) -> str:
        return build_select(
            tables=self.tables,
            columns_by_table=self.columns_by_table,
            joins=self.joins,
            conditions=self.conditions,
            group_by=self.group_by,
            order_by=self.order_by,
            limit=self.limit,
            offset=self.offset,
        )
