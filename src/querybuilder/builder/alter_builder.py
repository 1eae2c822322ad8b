"""스키마 ALTER 작업 빌더.

UI 동작(컬럼 추가/수정/삭제, NULL 허용 전환, 기본값, 코멘트, 기본 키,
인덱스, 외래 키)을 순서 있는 AlterOperation 목록으로 변환한다. 목록은
한 번의 요청으로 /alter.php에 전달되고, 실제 ALTER와 트랜잭션 처리는
백엔드가 맡는다.

컬럼 수정 계열 작업은 항상 기존 ColumnMeta에서 전체 정의를 다시 만든다.
바꾸려는 속성 외의 속성(auto_increment, 기본값, 코멘트)은 그대로 유지되며,
auto_increment 컬럼에는 기본값을 넣지 않는다.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

from querybuilder.core.exceptions import ValidationError
from querybuilder.core.models import ColumnMeta, ReferentialAction

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
POSITION_PATTERN = re.compile(r"^(FIRST|AFTER\s+`?[a-zA-Z_][a-zA-Z0-9_]*`?)$", re.IGNORECASE)

UNSIGNED_CAPABLE_TYPES = ("INT", "BIGINT", "SMALLINT", "TINYINT", "DECIMAL", "FLOAT", "DOUBLE")
VALID_ENGINES = ("InnoDB", "MyISAM", "MEMORY", "CSV", "ARCHIVE")
VALID_CHARSETS = ("utf8mb4", "utf8", "latin1", "ascii")
VALID_COLLATIONS = ("utf8mb4_unicode_ci", "utf8mb4_general_ci", "utf8_general_ci", "latin1_swedish_ci")


class AlterOperationType(Enum):
    """ALTER 작업 종류."""

    ADD_COLUMN = "ADD_COLUMN"
    MODIFY_COLUMN = "MODIFY_COLUMN"
    RENAME_COLUMN = "RENAME_COLUMN"
    DROP_COLUMN = "DROP_COLUMN"
    ADD_PRIMARY_KEY = "ADD_PRIMARY_KEY"
    DROP_PRIMARY_KEY = "DROP_PRIMARY_KEY"
    ADD_INDEX = "ADD_INDEX"
    ADD_UNIQUE = "ADD_UNIQUE"
    DROP_INDEX = "DROP_INDEX"
    ADD_FOREIGN_KEY = "ADD_FOREIGN_KEY"
    DROP_FOREIGN_KEY = "DROP_FOREIGN_KEY"
    RENAME_TABLE = "RENAME_TABLE"
    CHANGE_ENGINE = "CHANGE_ENGINE"
    CHANGE_CHARSET = "CHANGE_CHARSET"


@dataclass
class AlterColumnDefinition:
    """ADD/MODIFY COLUMN 정의.

    has_default가 False면 payload에 default 키 자체가 없다 (기본값 제거).
    has_default가 True이고 default가 None이면 DEFAULT NULL이다.
    """

    type: str
    nullable: bool = True
    auto_increment: bool = False
    default: Optional[str] = None
    has_default: bool = False
    comment: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "nullable": self.nullable}
        if self.auto_increment:
            payload["auto_increment"] = True
        if self.has_default:
            payload["default"] = self.default
        if self.comment:
            payload["comment"] = self.comment
        return payload


@dataclass
class AlterOperation:
    """ALTER 작업 베이스."""

    kind: ClassVar[AlterOperationType]

    @property
    def type(self) -> AlterOperationType:
        return self.kind

    @property
    def is_destructive(self) -> bool:
        return self.type.value.startswith("DROP")

    def _fields(self) -> dict[str, Any]:
        return {}

    def to_payload(self) -> dict[str, Any]:
        """/alter.php로 보낼 딕셔너리."""
        return {"type": self.type.value, **self._fields()}


@dataclass
class AddColumn(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.ADD_COLUMN

    column: str
    definition: AlterColumnDefinition
    position: Optional[str] = None

    def _fields(self) -> dict[str, Any]:
        return {
            "column": self.column,
            "definition": self.definition.to_payload(),
            "position": self.position,
        }


@dataclass
class ModifyColumn(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.MODIFY_COLUMN

    column: str
    definition: AlterColumnDefinition

    def _fields(self) -> dict[str, Any]:
        return {"column": self.column, "definition": self.definition.to_payload()}


@dataclass
class RenameColumn(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.RENAME_COLUMN

    column: str
    new_name: str

    def _fields(self) -> dict[str, Any]:
        return {"column": self.column, "newName": self.new_name}


@dataclass
class DropColumn(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.DROP_COLUMN

    column: str

    def _fields(self) -> dict[str, Any]:
        return {"column": self.column}


@dataclass
class AddPrimaryKey(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.ADD_PRIMARY_KEY

    columns: list[str] = field(default_factory=list)

    def _fields(self) -> dict[str, Any]:
        return {"columns": list(self.columns)}


@dataclass
class DropPrimaryKey(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.DROP_PRIMARY_KEY


@dataclass
class AddIndex(AlterOperation):
    """일반 인덱스 또는 UNIQUE 제약 추가."""

    kind: ClassVar[AlterOperationType] = AlterOperationType.ADD_INDEX

    columns: list[str] = field(default_factory=list)
    name: Optional[str] = None
    unique: bool = False
    index_type: str = "BTREE"

    @property
    def type(self) -> AlterOperationType:
        return AlterOperationType.ADD_UNIQUE if self.unique else AlterOperationType.ADD_INDEX

    def _fields(self) -> dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns), "index_type": self.index_type}


@dataclass
class DropIndex(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.DROP_INDEX

    name: str

    def _fields(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class AddForeignKey(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.ADD_FOREIGN_KEY

    column: str
    ref_table: str
    ref_column: str
    name: Optional[str] = None
    on_delete: ReferentialAction = ReferentialAction.RESTRICT
    on_update: ReferentialAction = ReferentialAction.RESTRICT

    def _fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "column": self.column,
            "references": {"table": self.ref_table, "column": self.ref_column},
            "on_delete": self.on_delete.value,
            "on_update": self.on_update.value,
        }


@dataclass
class DropForeignKey(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.DROP_FOREIGN_KEY

    name: str

    def _fields(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class RenameTable(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.RENAME_TABLE

    new_name: str

    def _fields(self) -> dict[str, Any]:
        return {"newName": self.new_name}


@dataclass
class ChangeEngine(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.CHANGE_ENGINE

    engine: str

    def _fields(self) -> dict[str, Any]:
        return {"engine": self.engine}


@dataclass
class ChangeCharset(AlterOperation):
    kind: ClassVar[AlterOperationType] = AlterOperationType.CHANGE_CHARSET

    charset: str
    collation: str

    def _fields(self) -> dict[str, Any]:
        return {"charset": self.charset, "collation": self.collation}


@dataclass
class ColumnForm:
    """컬럼 추가/수정 폼 입력값."""

    name: str
    type: str = "VARCHAR"
    length: str = ""
    nullable: bool = True
    unsigned: bool = False
    auto_increment: bool = False
    default: Optional[str] = None
    comment: Optional[str] = None
    position: Optional[str] = None

    def full_type(self) -> str:
        """type[(length)][ UNSIGNED]."""
        full_type = self.type
        if self.length and "(" not in self.type:
            full_type += f"({self.length})"
        if self.unsigned and any(t in self.type.upper() for t in UNSIGNED_CAPABLE_TYPES):
            full_type += " UNSIGNED"
        return full_type


def validate_identifier(name: Optional[str], label: str) -> str:
    """식별자 검증.

    Raises:
        ValidationError: 비어 있거나 허용되지 않는 문자가 있을 때
    """
    value = (name or "").strip()
    if not value:
        raise ValidationError(f"{label} is required")
    if not IDENTIFIER_PATTERN.match(value):
        raise ValidationError(
            f"Invalid {label.lower()}. Use only letters, numbers, and underscores."
        )
    return value


def _require(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(message)
    return value


class SchemaAlterBuilder:
    """UI 동작을 ALTER 작업 목록으로 변환하는 빌더.

    모든 메서드는 검증을 먼저 수행하며, 실패하면 ValidationError를 던지고
    일부만 만들어진 작업은 반환하지 않는다.
    """

    def add_column(self, form: ColumnForm) -> list[AlterOperation]:
        """ADD COLUMN 작업."""
        name = validate_identifier(form.name, "Column name")
        position = (form.position or "").strip() or None
        if position and not POSITION_PATTERN.match(position):
            raise ValidationError(f"Invalid column position: {position}")

        definition = self._definition_from_form(form)
        return [AddColumn(column=name, definition=definition, position=position)]

    def modify_column(self, column: ColumnMeta, form: ColumnForm) -> list[AlterOperation]:
        """폼 전체 값으로 MODIFY COLUMN 작업."""
        name = _require(column.name if column else None, "No column selected")
        return [ModifyColumn(column=name, definition=self._definition_from_form(form))]

    def toggle_nullable(self, column: ColumnMeta) -> list[AlterOperation]:
        """NULL 허용 여부만 반전."""
        definition = self._definition_from_meta(column)
        definition.nullable = not column.nullable
        return [ModifyColumn(column=column.name, definition=definition)]

    def set_default(self, column: ColumnMeta, value: Optional[str]) -> list[AlterOperation]:
        """기본값 지정 (None이면 DEFAULT NULL).

        Raises:
            ValidationError: auto_increment 컬럼일 때
        """
        if column.is_auto_increment:
            raise ValidationError("Auto-increment columns cannot have a default value")
        definition = self._definition_from_meta(column)
        definition.has_default = True
        definition.default = value
        return [ModifyColumn(column=column.name, definition=definition)]

    def remove_default(self, column: ColumnMeta) -> list[AlterOperation]:
        """기본값 제거."""
        definition = self._definition_from_meta(column)
        definition.has_default = False
        definition.default = None
        return [ModifyColumn(column=column.name, definition=definition)]

    def set_comment(self, column: ColumnMeta, comment: Optional[str]) -> list[AlterOperation]:
        """코멘트 지정 (빈 값이면 제거)."""
        definition = self._definition_from_meta(column)
        definition.comment = (comment or "").strip() or None
        return [ModifyColumn(column=column.name, definition=definition)]

    def rename_column(self, column: ColumnMeta, new_name: str) -> list[AlterOperation]:
        name = validate_identifier(new_name, "New column name")
        return [RenameColumn(column=column.name, new_name=name)]

    def drop_column(self, column_name: str) -> list[AlterOperation]:
        """DROP COLUMN 작업 (확인 절차는 호출자 책임)."""
        return [DropColumn(column=_require(column_name, "Column name is required"))]

    def change_primary_key(
        self, columns: list[str], current_primary_key: list[str]
    ) -> list[AlterOperation]:
        """기본 키 교체.

        Args:
            columns: 새 기본 키 컬럼 (선택 순서)
            current_primary_key: 현재 기본 키 컬럼

        Returns:
            기본 키가 있으면 [DROP_PRIMARY_KEY, ADD_PRIMARY_KEY], 없으면 [ADD_PRIMARY_KEY]

        Raises:
            ValidationError: 선택된 컬럼이 없을 때
        """
        if not columns:
            raise ValidationError("Select at least one column for the primary key")

        operations: list[AlterOperation] = []
        if current_primary_key:
            operations.append(DropPrimaryKey())
        operations.append(AddPrimaryKey(columns=list(columns)))
        return operations

    def add_index(
        self,
        columns: list[str],
        name: Optional[str] = None,
        unique: bool = False,
        index_type: str = "BTREE",
    ) -> list[AlterOperation]:
        """인덱스 또는 UNIQUE 제약 추가.

        FULLTEXT는 UNIQUE가 아닌 인덱스에서만 쓸 수 있다.
        """
        if not columns:
            raise ValidationError("Select at least one column for the index")

        index_type = (index_type or "BTREE").upper()
        if unique or index_type != "FULLTEXT":
            index_type = "BTREE"

        return [
            AddIndex(
                columns=list(columns),
                name=(name or "").strip() or None,
                unique=unique,
                index_type=index_type,
            )
        ]

    def drop_index(self, name: str) -> list[AlterOperation]:
        return [DropIndex(name=_require(name, "Index name is required"))]

    def add_foreign_key(
        self,
        column: str,
        ref_table: str,
        ref_column: str,
        name: Optional[str] = None,
        on_delete: Optional[ReferentialAction] = None,
        on_update: Optional[ReferentialAction] = None,
    ) -> list[AlterOperation]:
        """외래 키 추가 (이름이 없으면 백엔드가 생성)."""
        return [
            AddForeignKey(
                column=_require(column, "Local column is required"),
                ref_table=_require(ref_table, "Referenced table is required"),
                ref_column=_require(ref_column, "Referenced column is required"),
                name=(name or "").strip() or None,
                on_delete=on_delete or ReferentialAction.RESTRICT,
                on_update=on_update or ReferentialAction.RESTRICT,
            )
        ]

    def drop_foreign_key(self, name: str) -> list[AlterOperation]:
        return [DropForeignKey(name=_require(name, "Constraint name is required"))]

    def rename_table(self, new_name: str) -> list[AlterOperation]:
        return [RenameTable(new_name=validate_identifier(new_name, "New table name"))]

    def change_engine(self, engine: str) -> list[AlterOperation]:
        if engine not in VALID_ENGINES:
            raise ValidationError(f"Invalid storage engine: {engine}")
        return [ChangeEngine(engine=engine)]

    def change_charset(self, charset: str, collation: str) -> list[AlterOperation]:
        if charset not in VALID_CHARSETS:
            raise ValidationError(f"Invalid charset: {charset}")
        if collation not in VALID_COLLATIONS:
            raise ValidationError(f"Invalid collation: {collation}")
        return [ChangeCharset(charset=charset, collation=collation)]

    @staticmethod
    def _definition_from_form(form: ColumnForm) -> AlterColumnDefinition:
        default = form.default if form.default not in (None, "") else None
        # auto_increment와 DEFAULT는 함께 쓸 수 없다
        has_default = default is not None and not form.auto_increment
        return AlterColumnDefinition(
            type=form.full_type(),
            nullable=form.nullable,
            auto_increment=form.auto_increment,
            default=default if has_default else None,
            has_default=has_default,
            comment=(form.comment or "").strip() or None,
        )

    @staticmethod
    def _definition_from_meta(column: ColumnMeta) -> AlterColumnDefinition:
        """기존 컬럼 속성을 모두 보존한 정의."""
        if column is None or not column.name:
            raise ValidationError("Column not found")

        definition = AlterColumnDefinition(
            type=column.full_type,
            nullable=column.nullable,
            comment=column.comment or None,
        )
        if column.is_auto_increment:
            definition.auto_increment = True
        elif column.default_value is not None:
            definition.has_default = True
            definition.default = column.default_value
        return definition
