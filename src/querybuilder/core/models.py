"""Core 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class KeyType(Enum):
    """컬럼 키 타입 (information_schema COLUMN_KEY)."""

    NONE = ""
    PRIMARY = "PRI"
    UNIQUE = "UNI"
    INDEX = "MUL"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "KeyType":
        """COLUMN_KEY 코드를 KeyType으로 변환.

        Args:
            code: "PRI", "UNI", "MUL" 또는 빈 값

        Returns:
            대응하는 KeyType (알 수 없으면 NONE)
        """
        for key_type in cls:
            if key_type.value == (code or "").upper():
                return key_type
        return cls.NONE


@dataclass
class ColumnMeta:
    """스키마 조회 API에서 받은 컬럼 메타데이터 (읽기 전용)."""

    name: str
    data_type: str
    column_type: str = ""
    nullable: bool = True
    default_value: Optional[str] = None
    key_type: KeyType = KeyType.NONE
    extra: str = ""
    comment: Optional[str] = None

    @property
    def is_auto_increment(self) -> bool:
        """auto_increment 컬럼 여부."""
        return "auto_increment" in (self.extra or "").lower()

    @property
    def is_unsigned(self) -> bool:
        """unsigned 숫자 컬럼 여부."""
        return "unsigned" in (self.column_type or "").lower()

    @property
    def full_type(self) -> str:
        """길이/속성을 포함한 전체 타입 (없으면 data_type)."""
        return self.column_type or self.data_type

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> "ColumnMeta":
        """/schema.php 응답의 컬럼 행을 변환.

        Args:
            row: 컬럼 행 딕셔너리

        Returns:
            ColumnMeta 객체
        """
        nullable = row.get("nullable", True)
        if isinstance(nullable, str):
            nullable = nullable.upper() == "YES"

        default = row.get("default_value", row.get("default"))

        return cls(
            name=row["name"],
            data_type=row.get("data_type") or row.get("type", ""),
            column_type=row.get("column_type") or row.get("type", ""),
            nullable=bool(nullable),
            default_value=None if default is None else str(default),
            key_type=KeyType.from_code(row.get("key_type")),
            extra=row.get("extra") or "",
            comment=row.get("comment") or None,
        )


class Operator(Enum):
    """WHERE 조건 연산자."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    LIKE = "LIKE"
    IN = "IN"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"
    BETWEEN = "BETWEEN"


class Connector(Enum):
    """인접 조건을 잇는 논리 연산자."""

    AND = "AND"
    OR = "OR"


ConditionValue = Union[str, list[str], tuple[str, str], None]


@dataclass
class Condition:
    """WHERE 절 조건 하나.

    첫 번째로 렌더링되는 조건의 connector는 무시된다.
    """

    column: str
    operator: Operator = Operator.EQ
    value: ConditionValue = ""
    connector: Connector = Connector.AND


@dataclass
class SetValue:
    """UPDATE SET 절 할당 하나."""

    column: str
    value: Optional[str] = None
    is_null: bool = False


class JoinType(Enum):
    """JOIN 종류."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass
class JoinSpec:
    """JOIN 명세."""

    type: JoinType
    left_table: str
    left_column: str
    right_table: str
    right_column: str

    @property
    def is_complete(self) -> bool:
        """양쪽 컬럼이 모두 지정되었는지 여부."""
        return bool(self.left_column) and bool(self.right_column)


class SortDirection(Enum):
    """정렬 방향."""

    ASC = "ASC"
    DESC = "DESC"


@dataclass
class OrderBy:
    """ORDER BY 항목."""

    column: str
    direction: SortDirection = SortDirection.ASC


# 길이 대신 값 목록을 갖는 타입
ENUM_LIKE_TYPES = frozenset({"ENUM", "SET"})


@dataclass
class ColumnDefinition:
    """CREATE TABLE 컬럼 정의.

    length와 enum_values는 type이 ENUM/SET인지에 따라 둘 중 하나만 쓴다.
    """

    name: str
    type: str
    length: str = ""
    enum_values: str = ""
    nullable: bool = True
    unsigned: bool = False
    auto_increment: bool = False
    primary_key: bool = False
    unique: bool = False
    default_value: str = ""
    extra: str = ""
    comment: str = ""


class IndexType(Enum):
    """CREATE TABLE 추가 인덱스 종류."""

    INDEX = "INDEX"
    UNIQUE = "UNIQUE"
    FULLTEXT = "FULLTEXT"


@dataclass
class IndexSpec:
    """이름 있는 인덱스 명세."""

    name: str
    columns: list[str]
    type: IndexType = IndexType.INDEX


class ReferentialAction(Enum):
    """외래 키 참조 동작."""

    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    NO_ACTION = "NO ACTION"


@dataclass
class ForeignKeySpec:
    """외래 키 명세."""

    name: str
    column: str
    ref_table: str
    ref_column: str
    on_delete: Optional[ReferentialAction] = None
    on_update: Optional[ReferentialAction] = None


@dataclass
class IndexMeta:
    """스키마 조회 API의 인덱스 정보."""

    name: str
    columns: list[str]
    unique: bool = False
    type: str = "BTREE"


@dataclass
class TableSchema:
    """테이블 스키마 (컬럼, 기본 키, 인덱스, 외래 키)."""

    table: str
    columns: list[ColumnMeta] = field(default_factory=list)
    primary_key: list[str] = field(default_factory=list)
    indexes: list[IndexMeta] = field(default_factory=list)
    foreign_keys: list[dict[str, Any]] = field(default_factory=list)

    def find_column(self, name: str) -> Optional[ColumnMeta]:
        """이름으로 컬럼을 찾는다."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TableSchema":
        """/schema.php?table= 응답의 data 부분을 변환.

        Args:
            data: 응답 data 딕셔너리

        Returns:
            TableSchema 객체
        """
        columns = [ColumnMeta.from_api(row) for row in data.get("columns", [])]
        primary_key = data.get("primary_key")
        if primary_key is None:
            primary_key = [c.name for c in columns if c.key_type == KeyType.PRIMARY]

        indexes = [
            IndexMeta(
                name=row["name"],
                columns=list(row.get("columns", [])),
                unique=bool(row.get("unique", False)),
                type=row.get("type") or "BTREE",
            )
            for row in data.get("indexes", [])
        ]

        return cls(
            table=data.get("table", ""),
            columns=columns,
            primary_key=list(primary_key),
            indexes=indexes,
            foreign_keys=list(data.get("foreign_keys", [])),
        )
