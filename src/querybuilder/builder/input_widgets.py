"""컬럼 메타데이터 -> 입력 위젯 종류와 기본값 결정."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from querybuilder.core.models import ColumnMeta

ENUM_PATTERN = re.compile(r"(?:enum|set)\((.+)\)", re.IGNORECASE)
BOOLEAN_TYPES = ("tinyint(1)", "boolean", "bool")


class InputKind(Enum):
    """입력 위젯 종류."""

    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime-local"
    TIME = "time"
    TEXTAREA = "textarea"
    SELECT_ENUM = "select-enum"
    SELECT_BOOLEAN = "select-boolean"
    TEXT = "text"


@dataclass
class InputWidget:
    """컬럼 하나에 대한 입력 위젯 명세."""

    column: str
    kind: InputKind
    nullable: bool
    value: Optional[str] = None
    options: list[str] = field(default_factory=list)
    step: Optional[str] = None
    placeholder: str = ""


def parse_enum_options(column_type: str) -> list[str]:
    """enum('a','b') 형태에서 선택지를 꺼낸다."""
    match = ENUM_PATTERN.search(column_type or "")
    if not match:
        return []
    return [option.strip().replace("'", "") for option in match.group(1).split(",")]


def input_kind_for(column: ColumnMeta) -> InputKind:
    """컬럼 타입에 맞는 입력 위젯 종류."""
    data_type = (column.data_type or "").lower()
    full_type = (column.column_type or data_type).lower()

    if full_type in BOOLEAN_TYPES or data_type in BOOLEAN_TYPES:
        return InputKind.SELECT_BOOLEAN
    if any(marker in data_type for marker in ("int", "decimal", "float", "double")):
        return InputKind.NUMBER
    if "datetime" in data_type or "timestamp" in data_type:
        return InputKind.DATETIME
    if "date" in data_type:
        return InputKind.DATE
    if "time" in data_type:
        return InputKind.TIME
    if "text" in data_type or "blob" in data_type or data_type == "json":
        return InputKind.TEXTAREA
    if "enum" in data_type:
        return InputKind.SELECT_ENUM
    return InputKind.TEXT


def default_input_value(column: ColumnMeta) -> Optional[str]:
    """새 행 입력 시 초기값.

    auto_increment 컬럼과 CURRENT_TIMESTAMP 같은 서버 측 기본값은 비워 두고,
    기본값 없는 NULL 허용 컬럼은 None(NULL)으로 시작한다.
    """
    if column.is_auto_increment:
        return ""
    default = column.default_value
    if default is None:
        return None if column.nullable else ""
    if default.upper().startswith("CURRENT_TIMESTAMP"):
        return ""
    return default.strip("'")


def input_widget_for(column: ColumnMeta, value: Optional[str] = None) -> InputWidget:
    """컬럼 메타데이터로 입력 위젯 명세를 만든다.

    Args:
        column: 컬럼 메타데이터
        value: 현재 값 (없으면 기본 입력값)

    Returns:
        InputWidget 명세
    """
    kind = input_kind_for(column)
    widget = InputWidget(
        column=column.name,
        kind=kind,
        nullable=column.nullable,
        value=value if value is not None else default_input_value(column),
        placeholder=column.data_type,
    )

    if kind == InputKind.NUMBER and any(
        marker in column.data_type.lower() for marker in ("decimal", "float", "double")
    ):
        widget.step = "any"
    elif kind == InputKind.SELECT_ENUM:
        widget.options = parse_enum_options(column.column_type)
    elif kind == InputKind.SELECT_BOOLEAN:
        widget.options = ["1", "0"]
    elif kind == InputKind.DATETIME and widget.value:
        # datetime-local 입력 형식 (YYYY-MM-DDTHH:MM)
        widget.value = widget.value.replace(" ", "T")[:16]

    return widget
