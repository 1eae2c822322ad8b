"""값 포매터 - 컬럼 타입에 따라 SQL 리터럴 텍스트를 결정."""

import re
from typing import Any, Optional

from querybuilder.core.models import SetValue

NUMERIC_TYPE_MARKERS = ("int", "decimal", "float", "double")

# 로케일과 무관한 숫자 리터럴 (정수, 소수, 지수 표기)
NUMERIC_LITERAL_PATTERN = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*$")


def is_numeric_type(column_type: Optional[str]) -> bool:
    """컬럼 타입이 숫자 타입인지 판단한다.

    Args:
        column_type: data_type 또는 column_type (예: "int", "decimal(10,2)")

    Returns:
        int/decimal/float/double 중 하나를 포함하면 True
    """
    lowered = (column_type or "").lower()
    return any(marker in lowered for marker in NUMERIC_TYPE_MARKERS)


def looks_numeric(value: Any) -> bool:
    """타입 정보가 없을 때 값이 숫자 리터럴로 보이는지 판단한다."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return bool(NUMERIC_LITERAL_PATTERN.match(str(value)))


def quote_string(value: Any) -> str:
    """작은따옴표로 감싸고 내부 작은따옴표를 두 번 쓴다.

    백슬래시나 NUL은 이스케이프하지 않는다.
    """
    return "'" + str(value).replace("'", "''") + "'"


def format_value(value: Any, column_type: Optional[str] = None) -> str:
    """값을 컬럼 타입에 맞는 SQL 리터럴로 변환한다.

    Args:
        value: 원본 값 (None이면 NULL)
        column_type: 컬럼 타입 문자열

    Returns:
        SQL 리터럴 텍스트
    """
    if value is None:
        return "NULL"
    if is_numeric_type(column_type):
        return str(value)
    return quote_string(value)


def format_literal(value: Any, column_type: Optional[str] = None) -> str:
    """WHERE 조건 값용 리터럴.

    타입을 알면 타입 기준, 모르면 숫자 모양 여부로 따옴표를 결정한다.
    """
    if value is None:
        return "NULL"
    if column_type:
        return format_value(value, column_type)
    if str(value).strip() and looks_numeric(value):
        return str(value).strip()
    return quote_string(value)


def format_set_value(set_value: SetValue, column_type: Optional[str] = None) -> str:
    """UPDATE SET 값을 리터럴로 변환한다."""
    if set_value.is_null:
        return "NULL"
    return format_value(set_value.value, column_type)


def format_in_list(value: Any) -> str:
    """IN 연산자 값을 그대로 넣는다.

    요소별 따옴표 처리는 하지 않으며, 쉼표 안전성은 호출자 책임이다.
    """
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in in_list_values(value))
    return str(value)


def in_list_values(value: Any) -> list[Any]:
    """IN 값에서 비어 있지 않은 요소만 꺼낸다.

    문자열은 쉼표로 나눠 공백을 제거하고, 리스트/튜플은 빈 문자열과 None만 뺀다.
    """
    if isinstance(value, (list, tuple)):
        items = [v.strip() if isinstance(v, str) else v for v in value]
        return [item for item in items if item is not None and item != ""]
    items = [v.strip() for v in str(value or "").split(",")]
    return [item for item in items if item]
