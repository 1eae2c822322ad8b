"""CREATE TABLE 조립기."""

import copy
import logging
import re
from dataclasses import replace
from typing import Optional

from querybuilder.builder.base import SqlChangeCallback, StatementBuilder
from querybuilder.core.config import Settings
from querybuilder.core.exceptions import ValidationError
from querybuilder.core.models import (
    ENUM_LIKE_TYPES,
    ColumnDefinition,
    ColumnMeta,
    ForeignKeySpec,
    IndexSpec,
    IndexType,
    KeyType,
)

logger = logging.getLogger(__name__)

NO_TABLE_NAME = "-- Enter a table name to generate CREATE TABLE statement"
NO_COLUMNS = "-- Add at least one column to generate CREATE TABLE statement"

LENGTH_PATTERN = re.compile(r"\(([^)]+)\)")

# 자주 쓰는 컬럼 묶음
COLUMN_TEMPLATES: dict[str, tuple[str, list[ColumnDefinition]]] = {
    "id": (
        "ID (Primary Key)",
        [
            ColumnDefinition(
                name="id", type="INT", length="11", nullable=False,
                unsigned=True, auto_increment=True, primary_key=True,
            )
        ],
    ),
    "uuid": (
        "UUID (Primary Key)",
        [ColumnDefinition(name="id", type="CHAR", length="36", nullable=False, primary_key=True)],
    ),
    "timestamps": (
        "Timestamps (created_at, updated_at)",
        [
            ColumnDefinition(
                name="created_at", type="TIMESTAMP", nullable=False,
                default_value="CURRENT_TIMESTAMP",
            ),
            ColumnDefinition(
                name="updated_at", type="TIMESTAMP", nullable=False,
                default_value="CURRENT_TIMESTAMP", extra="ON UPDATE CURRENT_TIMESTAMP",
            ),
        ],
    ),
    "soft_delete": (
        "Soft Delete (deleted_at)",
        [ColumnDefinition(name="deleted_at", type="TIMESTAMP", nullable=True, default_value="NULL")],
    ),
    "status": (
        "Status Field",
        [
            ColumnDefinition(
                name="status", type="ENUM", enum_values="'active','inactive','pending'",
                nullable=False, default_value="'active'",
            )
        ],
    ),
}


def normalize_length(column: ColumnDefinition) -> ColumnDefinition:
    """타입에 따라 length/enum_values 중 하나만 남긴다.

    ENUM/SET이면 length 입력을 enum_values로 옮기고, 그 외에는 반대로 한다.
    """
    value = column.length or column.enum_values
    if column.type.upper() in ENUM_LIKE_TYPES:
        return replace(column, length="", enum_values=value)
    return replace(column, length=value, enum_values="")


def escape_comment(comment: str) -> str:
    return comment.replace("'", "\\'")


def render_column_definition(column: ColumnDefinition) -> str:
    """컬럼 정의 한 줄을 렌더링한다."""
    definition = f"  `{column.name}` {column.type}"

    if column.length:
        definition += f"({column.length})"
    elif column.enum_values:
        definition += f"({column.enum_values})"

    if column.unsigned:
        definition += " UNSIGNED"
    if not column.nullable:
        definition += " NOT NULL"
    if column.auto_increment:
        definition += " AUTO_INCREMENT"
    if column.default_value:
        definition += f" DEFAULT {column.default_value}"
    if column.extra:
        definition += f" {column.extra}"
    if column.comment:
        definition += f" COMMENT '{escape_comment(column.comment)}'"

    return definition


def _quoted_list(names: list[str]) -> str:
    return ", ".join(f"`{name}`" for name in names)


class CreateTableBuilder(StatementBuilder):
    """CREATE TABLE 빌더."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_sql_change: Optional[SqlChangeCallback] = None,
    ) -> None:
        """빌더 초기화.

        Args:
            settings: 기본 엔진/문자셋/콜레이션을 읽을 설정
            on_sql_change: SQL 변경 콜백
        """
        super().__init__(on_sql_change)
        self._settings = settings or Settings()
        self.table_name = ""
        self.engine = self._settings.default_engine
        self.charset = self._settings.default_charset
        self.collation = self._settings.default_collation
        self.columns: list[ColumnDefinition] = []
        self.indexes: list[IndexSpec] = []
        self.foreign_keys: list[ForeignKeySpec] = []

    def set_table_name(self, name: str) -> None:
        self.table_name = name.strip()
        self.update_sql()

    def set_engine(self, engine: str) -> None:
        self.engine = engine
        self.update_sql()

    def set_charset(self, charset: str) -> None:
        self.charset = charset
        self.update_sql()

    def set_collation(self, collation: str) -> None:
        self.collation = collation
        self.update_sql()

    def _validate_column(self, column: ColumnDefinition, edit_index: Optional[int]) -> None:
        if not column.name.strip():
            raise ValidationError("Column name is required")
        for idx, existing in enumerate(self.columns):
            if idx != edit_index and existing.name.lower() == column.name.strip().lower():
                raise ValidationError("A column with this name already exists")

    def add_column(self, column: ColumnDefinition) -> None:
        """컬럼 추가.

        Raises:
            ValidationError: 이름이 없거나 (대소문자 무시) 중복일 때
        """
        self._validate_column(column, None)
        self.columns.append(normalize_length(replace(column, name=column.name.strip())))
        self.update_sql()

    def update_column(self, index: int, column: ColumnDefinition) -> None:
        self._validate_column(column, index)
        self.columns[index] = normalize_length(replace(column, name=column.name.strip()))
        self.update_sql()

    def remove_column(self, index: int) -> None:
        del self.columns[index]
        self.update_sql()

    def move_column(self, from_index: int, to_index: int) -> None:
        """컬럼 순서 변경 (드래그 정렬)."""
        column = self.columns.pop(from_index)
        self.columns.insert(to_index, column)
        self.update_sql()

    def apply_template(self, key: str) -> list[str]:
        """템플릿 컬럼 추가.

        Args:
            key: COLUMN_TEMPLATES 키

        Returns:
            실제로 추가된 컬럼명 (같은 이름이 이미 있으면 건너뜀)
        """
        if key not in COLUMN_TEMPLATES:
            raise ValidationError(f"Unknown column template: {key}")

        existing = {c.name.lower() for c in self.columns}
        added = []
        for column in COLUMN_TEMPLATES[key][1]:
            if column.name.lower() in existing:
                continue
            self.columns.append(copy.deepcopy(column))
            added.append(column.name)

        self.update_sql()
        return added

    def clone_structure(self, columns: list[ColumnMeta]) -> None:
        """기존 테이블 컬럼 메타데이터로 컬럼 목록을 대체."""
        self.columns = [
            normalize_length(
                ColumnDefinition(
                    name=meta.name,
                    type=meta.data_type.upper(),
                    length=self._extract_length(meta.column_type),
                    nullable=meta.nullable,
                    default_value=meta.default_value or "",
                    auto_increment=meta.is_auto_increment,
                    unsigned=meta.is_unsigned,
                    primary_key=meta.key_type == KeyType.PRIMARY,
                    unique=meta.key_type == KeyType.UNIQUE,
                    comment=meta.comment or "",
                )
            )
            for meta in columns
        ]
        logger.info("Cloned %d columns into CREATE TABLE builder", len(self.columns))
        self.update_sql()

    @staticmethod
    def _extract_length(column_type: str) -> str:
        match = LENGTH_PATTERN.search(column_type or "")
        return match.group(1) if match else ""

    def add_index(self, index: IndexSpec) -> None:
        """추가 인덱스 등록.

        Raises:
            ValidationError: 이름이 없거나 컬럼이 하나도 없을 때
        """
        if not index.name.strip():
            raise ValidationError("Index name is required")
        if not index.columns:
            raise ValidationError("Select at least one column for the index")
        self.indexes.append(index)
        self.update_sql()

    def remove_index(self, index: int) -> None:
        del self.indexes[index]
        self.update_sql()

    def add_foreign_key(self, foreign_key: ForeignKeySpec) -> None:
        """외래 키 등록.

        Raises:
            ValidationError: 제약 이름, 컬럼, 참조 테이블/컬럼 중 하나라도 없을 때
        """
        if not foreign_key.name.strip():
            raise ValidationError("Constraint name is required")
        if not foreign_key.column:
            raise ValidationError("Select a column")
        if not foreign_key.ref_table or not foreign_key.ref_column:
            raise ValidationError("Select reference table and column")
        self.foreign_keys.append(foreign_key)
        self.update_sql()

    def remove_foreign_key(self, index: int) -> None:
        del self.foreign_keys[index]
        self.update_sql()

    def validate(self) -> None:
        """실행 전 검증.

        Raises:
            ValidationError: 테이블명이나 컬럼이 없을 때
        """
        if not self.table_name:
            raise ValidationError("Please enter a table name")
        if not self.columns:
            raise ValidationError("Please add at least one column")

    def build_sql(self) -> str:
        if not self.table_name:
            return NO_TABLE_NAME
        if not self.columns:
            return NO_COLUMNS

        clauses = [render_column_definition(column) for column in self.columns]

        primary_key = [c.name for c in self.columns if c.primary_key]
        if primary_key:
            clauses.append(f"  PRIMARY KEY ({_quoted_list(primary_key)})")

        # 각 unique 컬럼은 단일 컬럼 UNIQUE KEY가 된다
        for column in self.columns:
            if column.unique and not column.primary_key:
                clauses.append(f"  UNIQUE KEY `{column.name}_unique` (`{column.name}`)")

        for index in self.indexes:
            keyword = {
                IndexType.UNIQUE: "UNIQUE KEY",
                IndexType.FULLTEXT: "FULLTEXT KEY",
            }.get(index.type, "KEY")
            clauses.append(f"  {keyword} `{index.name}` ({_quoted_list(index.columns)})")

        for fk in self.foreign_keys:
            clause = (
                f"  CONSTRAINT `{fk.name}` FOREIGN KEY (`{fk.column}`) "
                f"REFERENCES `{fk.ref_table}`(`{fk.ref_column}`)"
            )
            if fk.on_delete:
                clause += f" ON DELETE {fk.on_delete.value}"
            if fk.on_update:
                clause += f" ON UPDATE {fk.on_update.value}"
            clauses.append(clause)

        return (
            f"CREATE TABLE `{self.table_name}` (\n"
            + ",\n".join(clauses)
            + f"\n) ENGINE={self.engine} DEFAULT CHARSET={self.charset} COLLATE={self.collation};"
        )

    def clear(self) -> None:
        self.table_name = ""
        self.engine = self._settings.default_engine
        self.charset = self._settings.default_charset
        self.collation = self._settings.default_collation
        self.columns = []
        self.indexes = []
        self.foreign_keys = []
        self.update_sql()

    def get_data(self) -> dict:
        return {
            "table_name": self.table_name,
            "engine": self.engine,
            "charset": self.charset,
            "collation": self.collation,
            "columns": self.columns,
            "indexes": self.indexes,
            "foreign_keys": self.foreign_keys,
        }
