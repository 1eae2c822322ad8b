"""ALTER TABLE 미리보기 렌더러.

백엔드(/alter.php)가 작업 목록으로 만들 ALTER TABLE 문을 같은 규칙으로
미리 보여준다. 실행은 하지 않는다.
"""

import re
from typing import Any, Callable

from querybuilder.builder.alter_builder import (
    AlterOperation,
    AlterOperationType,
    POSITION_PATTERN,
    VALID_CHARSETS,
    VALID_COLLATIONS,
    VALID_ENGINES,
    validate_identifier,
)
from querybuilder.core.exceptions import ValidationError

NO_OPERATIONS = "-- Add operations to generate ALTER statement"

VALID_ACTIONS = ("RESTRICT", "CASCADE", "SET NULL", "NO ACTION")

NUMERIC_DEFAULT_PATTERN = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")


def _escape(value: str) -> str:
    """백엔드의 addslashes와 같은 이스케이프."""
    return (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace('"', '\\"')
        .replace("\0", "\\0")
    )


def render_column_definition(definition: dict[str, Any]) -> str:
    """definition payload를 컬럼 정의 텍스트로 변환."""
    if not definition.get("type"):
        raise ValidationError("Column type is required in definition")

    parts = [definition["type"]]

    if "nullable" in definition and definition["nullable"] is not None:
        parts.append("NULL" if definition["nullable"] else "NOT NULL")

    if "default" in definition:
        default = definition["default"]
        if default is None or str(default).upper() == "NULL":
            parts.append("DEFAULT NULL")
        elif str(default).upper() == "CURRENT_TIMESTAMP":
            parts.append("DEFAULT CURRENT_TIMESTAMP")
        elif NUMERIC_DEFAULT_PATTERN.match(str(default)):
            parts.append(f"DEFAULT {default}")
        else:
            parts.append(f"DEFAULT '{_escape(str(default))}'")

    if definition.get("auto_increment"):
        parts.append("AUTO_INCREMENT")

    if definition.get("comment"):
        parts.append(f"COMMENT '{_escape(definition['comment'])}'")

    return " ".join(parts)


def _add_column(op: dict[str, Any]) -> str:
    column = validate_identifier(op.get("column"), "Column name")
    sql = f"ADD COLUMN `{column}` {render_column_definition(op.get('definition') or {})}"
    position = op.get("position")
    if position and POSITION_PATTERN.match(position):
        sql += f" {position}"
    return sql


def _modify_column(op: dict[str, Any]) -> str:
    column = validate_identifier(op.get("column"), "Column name")
    return f"MODIFY COLUMN `{column}` {render_column_definition(op.get('definition') or {})}"


def _rename_column(op: dict[str, Any]) -> str:
    old = validate_identifier(op.get("column"), "Column name")
    new = validate_identifier(op.get("newName"), "New column name")
    return f"RENAME COLUMN `{old}` TO `{new}`"


def _drop_column(op: dict[str, Any]) -> str:
    return f"DROP COLUMN `{validate_identifier(op.get('column'), 'Column name')}`"


def _column_list(op: dict[str, Any], label: str) -> str:
    columns = op.get("columns") or []
    if not columns:
        raise ValidationError(f"Columns are required for {label}")
    return ", ".join(f"`{validate_identifier(c, 'Column name')}`" for c in columns)


def _add_index(op: dict[str, Any], force_unique: bool = False) -> str:
    index_type = op.get("index_type") or "INDEX"
    if force_unique:
        index_type = "UNIQUE"
    keyword = index_type if index_type in ("UNIQUE", "FULLTEXT") else "INDEX"

    columns = _column_list(op, "ADD_INDEX")
    name = op.get("name")
    if not name:
        prefix = "uniq" if keyword == "UNIQUE" else "idx"
        name = prefix + "_" + "_".join(op["columns"])
    name = validate_identifier(name, "Index name")
    return f"ADD {keyword} `{name}` ({columns})"


def _add_primary_key(op: dict[str, Any]) -> str:
    return f"ADD PRIMARY KEY ({_column_list(op, 'ADD_PRIMARY_KEY')})"


def _drop_index(op: dict[str, Any]) -> str:
    return f"DROP INDEX `{validate_identifier(op.get('name'), 'Index name')}`"


def _add_foreign_key(op: dict[str, Any]) -> str:
    references = op.get("references") or {}
    column = validate_identifier(op.get("column"), "Column")
    ref_table = validate_identifier(references.get("table"), "Reference table")
    ref_column = validate_identifier(references.get("column"), "Reference column")

    on_delete = op.get("on_delete") if op.get("on_delete") in VALID_ACTIONS else "RESTRICT"
    on_update = op.get("on_update") if op.get("on_update") in VALID_ACTIONS else "RESTRICT"

    name = validate_identifier(op.get("name") or f"fk_{column}_{ref_table}", "Constraint name")
    return (
        f"ADD CONSTRAINT `{name}` FOREIGN KEY (`{column}`) "
        f"REFERENCES `{ref_table}`(`{ref_column}`) ON DELETE {on_delete} ON UPDATE {on_update}"
    )


def _drop_foreign_key(op: dict[str, Any]) -> str:
    return f"DROP FOREIGN KEY `{validate_identifier(op.get('name'), 'Constraint name')}`"


def _rename_table(op: dict[str, Any]) -> str:
    return f"RENAME TO `{validate_identifier(op.get('newName'), 'New table name')}`"


def _change_engine(op: dict[str, Any]) -> str:
    if op.get("engine") not in VALID_ENGINES:
        raise ValidationError("Invalid storage engine")
    return f"ENGINE = {op['engine']}"


def _change_charset(op: dict[str, Any]) -> str:
    charset = op.get("charset") if op.get("charset") in VALID_CHARSETS else "utf8mb4"
    collation = op.get("collation") if op.get("collation") in VALID_COLLATIONS else "utf8mb4_unicode_ci"
    return f"CHARACTER SET {charset} COLLATE {collation}"


RENDERERS: dict[AlterOperationType, Callable[[dict[str, Any]], str]] = {
    AlterOperationType.ADD_COLUMN: _add_column,
    AlterOperationType.MODIFY_COLUMN: _modify_column,
    AlterOperationType.RENAME_COLUMN: _rename_column,
    AlterOperationType.DROP_COLUMN: _drop_column,
    AlterOperationType.ADD_INDEX: _add_index,
    AlterOperationType.ADD_UNIQUE: lambda op: _add_index(op, force_unique=True),
    AlterOperationType.DROP_INDEX: _drop_index,
    AlterOperationType.ADD_PRIMARY_KEY: _add_primary_key,
    AlterOperationType.DROP_PRIMARY_KEY: lambda op: "DROP PRIMARY KEY",
    AlterOperationType.ADD_FOREIGN_KEY: _add_foreign_key,
    AlterOperationType.DROP_FOREIGN_KEY: _drop_foreign_key,
    AlterOperationType.RENAME_TABLE: _rename_table,
    AlterOperationType.CHANGE_ENGINE: _change_engine,
    AlterOperationType.CHANGE_CHARSET: _change_charset,
}


def render_operation(operation: AlterOperation | dict[str, Any]) -> str:
    """작업 하나를 ALTER 절로 렌더링.

    Raises:
        ValidationError: 작업 종류가 없거나 필수 값이 빠졌을 때
    """
    payload = operation.to_payload() if isinstance(operation, AlterOperation) else operation
    try:
        op_type = AlterOperationType(payload.get("type"))
    except ValueError as e:
        raise ValidationError(f"Unknown operation type: {payload.get('type')}") from e
    return RENDERERS[op_type](payload)


def render_alter_sql(table: str, operations: list[AlterOperation | dict[str, Any]]) -> str:
    """작업 목록을 하나의 ALTER TABLE 문으로 렌더링.

    Args:
        table: 테이블명
        operations: 순서 있는 작업 목록

    Returns:
        ALTER TABLE 문 (작업이 없으면 안내 문자열)
    """
    if not operations:
        return NO_OPERATIONS
    table = validate_identifier(table, "Table name")
    parts = [render_operation(op) for op in operations]
    return f"ALTER TABLE `{table}` " + ", ".join(parts) + ";"
