"""조건 트리 빌더 - WHERE 절 조건 목록을 평평한 AND/OR 체인으로 렌더링."""

from typing import Optional

from querybuilder.builder.value_formatter import format_in_list, format_literal, in_list_values
from querybuilder.core.exceptions import ValidationError
from querybuilder.core.models import Condition, Operator

NULL_CHECK_OPERATORS = (Operator.IS_NULL, Operator.IS_NOT_NULL)


def between_bounds(value: object) -> Optional[tuple[str, str]]:
    """BETWEEN 값에서 (최소, 최대)를 꺼낸다.

    Args:
        value: [min, max] 리스트/튜플 또는 "min,max" 문자열

    Returns:
        두 경계가 모두 있으면 튜플, 아니면 None
    """
    if isinstance(value, (list, tuple)):
        bounds = [str(v).strip() for v in value if v is not None]
    elif isinstance(value, str) and "," in value:
        bounds = [part.strip() for part in value.split(",", 1)]
    else:
        return None

    if len(bounds) < 2 or not bounds[0] or not bounds[1]:
        return None
    return bounds[0], bounds[1]


class WhereClauseBuilder:
    """WHERE 절 조건 렌더러.

    괄호 그룹은 없다. 조건은 목록 순서대로 왼쪽에서 오른쪽으로 이어진다.
    """

    def __init__(self, column_types: Optional[dict[str, str]] = None) -> None:
        """빌더 초기화.

        Args:
            column_types: 컬럼명 -> 타입 매핑 (없으면 값 모양으로 판단)
        """
        self._column_types = column_types or {}

    def column_type(self, column: str) -> Optional[str]:
        """컬럼 타입 조회 (전체 이름, 그다음 마지막 '.' 뒤 이름)."""
        if column in self._column_types:
            return self._column_types[column]
        short_name = column.rsplit(".", 1)[-1]
        return self._column_types.get(short_name)

    def valid_conditions(self, conditions: list[Condition]) -> list[Condition]:
        """렌더링 가능한 조건만 남긴다.

        컬럼이 비어 있거나, IN/BETWEEN 값이 비어 있으면 제외한다.
        """
        valid = []
        for condition in conditions:
            if not condition.column:
                continue
            if condition.operator == Operator.IN and not in_list_values(condition.value):
                continue
            if condition.operator == Operator.BETWEEN and between_bounds(condition.value) is None:
                continue
            valid.append(condition)
        return valid

    def has_conditions(self, conditions: list[Condition]) -> bool:
        """렌더링될 조건이 하나라도 있는지 여부."""
        return len(self.valid_conditions(conditions)) > 0

    def render_condition(self, condition: Condition) -> str:
        """조건 하나를 렌더링한다."""
        column = condition.column
        operator = condition.operator

        if operator in NULL_CHECK_OPERATORS:
            return f"{column} {operator.value}"

        if operator == Operator.IN:
            return f"{column} IN ({format_in_list(condition.value)})"

        column_type = self.column_type(column)

        if operator == Operator.BETWEEN:
            low, high = between_bounds(condition.value)
            return (
                f"{column} BETWEEN {format_literal(low, column_type)}"
                f" AND {format_literal(high, column_type)}"
            )

        value = "" if condition.value is None else condition.value
        return f"{column} {operator.value} {format_literal(value, column_type)}"

    def render(self, conditions: list[Condition]) -> str:
        """조건 목록을 WHERE 본문으로 렌더링한다.

        Args:
            conditions: 순서 있는 조건 목록

        Returns:
            WHERE 키워드 없는 조건 텍스트 (조건이 없으면 빈 문자열)
        """
        parts = []
        for idx, condition in enumerate(self.valid_conditions(conditions)):
            if idx > 0:
                parts.append(condition.connector.value)
            parts.append(self.render_condition(condition))
        return " ".join(parts)

    def render_required(self, conditions: list[Condition]) -> str:
        """조건이 반드시 있어야 하는 대량 변경용 렌더링.

        Raises:
            ValidationError: 유효한 조건이 하나도 없을 때
        """
        rendered = self.render(conditions)
        if not rendered:
            raise ValidationError(
                "Conditions required to prevent accidental changes to every row"
            )
        return rendered
