"""DML 조립기 - UPDATE / DELETE / INSERT 미리보기와 파라미터 바인딩 대량 변경문."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from querybuilder.builder.base import SqlChangeCallback, StatementBuilder
from querybuilder.builder.conditions import NULL_CHECK_OPERATORS, WhereClauseBuilder, between_bounds
from querybuilder.builder.value_formatter import format_set_value, format_value, in_list_values
from querybuilder.core.exceptions import ValidationError
from querybuilder.core.models import ColumnMeta, Condition, Operator, SetValue

logger = logging.getLogger(__name__)

UPDATE_NO_TABLE = "-- Select a table to generate UPDATE statement"
UPDATE_NO_SET = "-- Select columns to update"
DELETE_NO_TABLE = "-- Select a table to generate DELETE statement"
INSERT_NO_ROWS = "-- Select a table and add rows to generate INSERT statement"


class _TableConditionBuilder(StatementBuilder):
    """단일 테이블 + WHERE 조건 상태를 갖는 빌더 공통부."""

    def __init__(self, on_sql_change: Optional[SqlChangeCallback] = None) -> None:
        super().__init__(on_sql_change)
        self.table: Optional[str] = None
        self.columns: list[ColumnMeta] = []
        self.conditions: list[Condition] = []

    def _reset_table_state(self) -> None:
        self.conditions = []

    def select_table(self, table: Optional[str], columns: list[ColumnMeta]) -> None:
        """대상 테이블과 컬럼 메타데이터를 지정 (기존 상태 초기화)."""
        self.table = table or None
        self.columns = list(columns)
        self._reset_table_state()
        self.update_sql()

    def column_type(self, name: str) -> Optional[str]:
        for column in self.columns:
            if column.name == name:
                return column.data_type
        return None

    def where_builder(self) -> WhereClauseBuilder:
        return WhereClauseBuilder({c.name: c.data_type for c in self.columns})

    def add_condition(self, condition: Condition) -> None:
        self.conditions.append(condition)
        self.update_sql()

    def update_condition(self, index: int, **changes: object) -> None:
        condition = self.conditions[index]
        for name, value in changes.items():
            if not hasattr(condition, name):
                raise AttributeError(f"Condition has no field '{name}'")
            setattr(condition, name, value)
        self.update_sql()

    def remove_condition(self, index: int) -> None:
        del self.conditions[index]
        self.update_sql()

    def has_unscoped_where(self) -> bool:
        """WHERE 절 없이 모든 행에 적용되는지 여부 (경고용, 생성은 막지 않음)."""
        return not self.where_builder().has_conditions(self.conditions)

    def _where_suffix(self) -> str:
        where = self.where_builder().render(self.conditions)
        return f"\nWHERE {where}" if where else ""

    def clear(self) -> None:
        self.table = None
        self.columns = []
        self._reset_table_state()
        self.update_sql()


class UpdateBuilder(_TableConditionBuilder):
    """대화형 UPDATE 미리보기 빌더."""

    def __init__(self, on_sql_change: Optional[SqlChangeCallback] = None) -> None:
        super().__init__(on_sql_change)
        self.set_values: dict[str, SetValue] = {}

    def _reset_table_state(self) -> None:
        super()._reset_table_state()
        self.set_values = {}

    def set_value(self, column: str, value: Optional[str] = None, is_null: bool = False) -> None:
        self.set_values[column] = SetValue(column=column, value=value, is_null=is_null)
        self.update_sql()

    def unset_value(self, column: str) -> None:
        """SET 절에서 컬럼을 뺀다."""
        self.set_values.pop(column, None)
        self.update_sql()

    def build_sql(self) -> str:
        if not self.table:
            return UPDATE_NO_TABLE

        set_clauses = [
            f"{column} = {format_set_value(set_value, self.column_type(column))}"
            for column, set_value in self.set_values.items()
        ]
        if not set_clauses:
            return UPDATE_NO_SET

        sql = f"UPDATE {self.table}\nSET " + ",\n    ".join(set_clauses)
        return sql + self._where_suffix() + ";"

    def get_data(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "set": self.set_values,
            "conditions": self.conditions,
        }


class DeleteBuilder(_TableConditionBuilder):
    """대화형 DELETE 미리보기 빌더."""

    def build_sql(self) -> str:
        if not self.table:
            return DELETE_NO_TABLE
        return f"DELETE FROM {self.table}" + self._where_suffix() + ";"

    def get_data(self) -> dict[str, Any]:
        return {"table": self.table, "conditions": self.conditions}


class InsertBuilder(StatementBuilder):
    """다중 행 INSERT 미리보기 빌더."""

    def __init__(self, on_sql_change: Optional[SqlChangeCallback] = None) -> None:
        super().__init__(on_sql_change)
        self.table: Optional[str] = None
        self.columns: list[ColumnMeta] = []
        self.rows: list[dict[str, Optional[str]]] = []

    def select_table(self, table: Optional[str], columns: list[ColumnMeta]) -> None:
        self.table = table or None
        self.columns = list(columns)
        self.rows = []
        self.update_sql()

    def add_row(self, values: Optional[dict[str, Optional[str]]] = None) -> None:
        self.rows.append(dict(values or {}))
        self.update_sql()

    def set_cell(self, row_index: int, column: str, value: Optional[str]) -> None:
        """셀 값 지정 (None이면 NULL)."""
        self.rows[row_index][column] = value
        self.update_sql()

    def remove_row(self, row_index: int) -> None:
        del self.rows[row_index]
        self.update_sql()

    def editable_columns(self) -> list[ColumnMeta]:
        """auto_increment 컬럼을 제외한 입력 대상 컬럼."""
        return [c for c in self.columns if not c.is_auto_increment]

    def _format_cell(self, column: ColumnMeta, row: dict[str, Optional[str]]) -> str:
        value = row.get(column.name)
        if value is None:
            return "NULL"
        if value == "":
            return "DEFAULT" if column.default_value is not None else "''"
        return format_value(value, column.data_type)

    def build_sql(self) -> str:
        if not self.table or not self.rows:
            return INSERT_NO_ROWS

        columns = self.editable_columns()
        value_rows = [
            "(" + ", ".join(self._format_cell(column, row) for column in columns) + ")"
            for row in self.rows
        ]
        column_names = ", ".join(c.name for c in columns)
        return (
            f"INSERT INTO {self.table} ({column_names})\nVALUES\n    "
            + ",\n    ".join(value_rows)
            + ";"
        )


@dataclass
class ParameterizedStatement:
    """이름 있는 placeholder(:name)를 쓰는 SQL과 바인딩 값."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def _build_where_params(
    conditions: list[Condition], prefix: str = ""
) -> tuple[str, dict[str, Any]]:
    """조건 목록을 placeholder 기반 WHERE 본문과 파라미터로 변환.

    Raises:
        ValidationError: 유효한 조건이 없을 때
    """
    valid = WhereClauseBuilder().valid_conditions(conditions)
    if not valid:
        raise ValidationError(
            "Conditions required to prevent accidental changes to every row"
        )

    parts: list[str] = []
    params: dict[str, Any] = {}
    for idx, condition in enumerate(valid):
        placeholder = f"{prefix}cond_{idx}"
        column = f"`{condition.column}`"
        operator = condition.operator

        if operator in NULL_CHECK_OPERATORS:
            clause = f"{column} {operator.value}"
        elif operator == Operator.IN:
            names = []
            for value_idx, value in enumerate(in_list_values(condition.value)):
                name = f"{placeholder}_{value_idx}"
                params[name] = value
                names.append(f":{name}")
            clause = f"{column} IN ({', '.join(names)})"
        elif operator == Operator.BETWEEN:
            low, high = between_bounds(condition.value)
            params[f"{placeholder}_min"] = low
            params[f"{placeholder}_max"] = high
            clause = f"{column} BETWEEN :{placeholder}_min AND :{placeholder}_max"
        else:
            params[placeholder] = condition.value
            clause = f"{column} {operator.value} :{placeholder}"

        if idx > 0:
            parts.append(condition.connector.value)
        parts.append(clause)

    return " ".join(parts), params


def build_update_where(
    table: str, data: dict[str, Any], conditions: list[Condition]
) -> Optional[ParameterizedStatement]:
    """조건 기반 대량 UPDATE 문.

    대화형 미리보기와 달리 조건이 없으면 경고가 아니라 에러다.

    Args:
        table: 테이블명
        data: 컬럼 -> 새 값
        conditions: WHERE 조건 (필수)

    Returns:
        ParameterizedStatement, data가 비어 있으면 None

    Raises:
        ValidationError: 테이블명이나 조건이 없을 때
    """
    if not table:
        raise ValidationError("Table name is required")
    where_sql, params = _build_where_params(conditions, prefix="where_")
    if not data:
        logger.info("build_update_where: nothing to update on %s", table)
        return None

    set_clauses = []
    for set_idx, (column, value) in enumerate(data.items()):
        name = f"set_{set_idx}"
        set_clauses.append(f"`{column}` = :{name}")
        params[name] = value

    sql = f"UPDATE `{table}` SET {', '.join(set_clauses)} WHERE {where_sql}"
    return ParameterizedStatement(sql=sql, params=params)


def build_delete_where(table: str, conditions: list[Condition]) -> ParameterizedStatement:
    """조건 기반 대량 DELETE 문.

    Raises:
        ValidationError: 테이블명이나 조건이 없을 때
    """
    if not table:
        raise ValidationError("Table name is required")
    where_sql, params = _build_where_params(conditions)
    return ParameterizedStatement(sql=f"DELETE FROM `{table}` WHERE {where_sql}", params=params)
