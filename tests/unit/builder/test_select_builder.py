"""SELECT 빌더 테스트."""

from unittest.mock import MagicMock

import sqlglot

from querybuilder.builder.select_builder import NO_TABLE_PLACEHOLDER, SelectBuilder, build_select
from querybuilder.core.models import (
    Condition,
    Connector,
    JoinSpec,
    JoinType,
    Operator,
    OrderBy,
    SortDirection,
)


class TestBuildSelect:
    """build_select 함수 테스트."""

    def test_end_to_end_orders_scenario(self) -> None:
        """주문 조회 시나리오가 정확한 SQL을 만들어야 함."""
        sql = build_select(
            tables=["orders"],
            columns_by_table={"orders": ["id", "total"]},
            joins=[],
            conditions=[Condition("orders.status", Operator.EQ, "shipped", Connector.AND)],
            group_by=[],
            order_by=[OrderBy("orders.id", SortDirection.DESC)],
            limit=10,
        )

        assert sql == (
            "SELECT orders.id, orders.total\n"
            "FROM orders\n"
            "WHERE orders.status = 'shipped'\n"
            "ORDER BY orders.id DESC\n"
            "LIMIT 10;"
        )
        assert sqlglot.parse_one(sql.rstrip(";"), read="mysql") is not None

    def test_no_tables_returns_placeholder(self) -> None:
        assert build_select([], {}, [], [], [], []) == NO_TABLE_PLACEHOLDER

    def test_table_without_selected_columns_uses_star(self) -> None:
        sql = build_select(["users", "orders"], {"orders": ["total"]}, [], [], [], [])

        assert sql.startswith("SELECT users.*, orders.total\nFROM users")

    def test_incomplete_join_is_skipped(self) -> None:
        joins = [
            JoinSpec(JoinType.LEFT, "users", "id", "orders", "user_id"),
            JoinSpec(JoinType.INNER, "users", "id", "payments", ""),
        ]

        sql = build_select(["users", "orders"], {}, joins, [], [], [])

        assert "LEFT JOIN orders ON users.id = orders.user_id" in sql
        assert "payments" not in sql

    def test_group_by_and_multiple_order_by(self) -> None:
        sql = build_select(
            ["orders"],
            {"orders": ["status"]},
            [],
            [],
            ["orders.status"],
            [OrderBy("orders.status"), OrderBy(""), OrderBy("orders.id", SortDirection.DESC)],
        )

        assert "GROUP BY orders.status" in sql
        assert "ORDER BY orders.status ASC, orders.id DESC" in sql

    def test_offset_requires_limit(self) -> None:
        """OFFSET은 LIMIT이 있을 때만 출력된다."""
        with_limit = build_select(["t"], {}, [], [], [], [], limit=10, offset=20)
        without_limit = build_select(["t"], {}, [], [], [], [], offset=20)

        assert with_limit.endswith("LIMIT 10 OFFSET 20;")
        assert "OFFSET" not in without_limit

    def test_generated_join_query_parses(self) -> None:
        sql = build_select(
            ["users", "orders"],
            {"users": ["name"], "orders": ["total"]},
            [JoinSpec(JoinType.INNER, "users", "id", "orders", "user_id")],
            [
                Condition("orders.total", Operator.GE, "100"),
                Condition("users.name", Operator.IS_NOT_NULL, connector=Connector.OR),
            ],
            [],
            [],
            limit=5,
        )

        assert "WHERE orders.total >= 100 OR users.name IS NOT NULL" in sql
        assert sqlglot.parse_one(sql.rstrip(";"), read="mysql") is not None


class TestSelectBuilder:
    """SelectBuilder 상태 변경 테스트."""

    def test_each_change_notifies_callback(self) -> None:
        """상태가 바뀔 때마다 콜백에 새 SQL을 넘겨야 함."""
        callback = MagicMock()
        builder = SelectBuilder(on_sql_change=callback)

        builder.add_table("orders")
        builder.toggle_column("orders", "id")

        assert callback.call_count == 2
        assert callback.call_args[0][0] == "SELECT orders.id\nFROM orders;"

    def test_toggle_column_twice_removes_it(self) -> None:
        builder = SelectBuilder()
        builder.add_table("orders")
        builder.toggle_column("orders", "id")
        builder.toggle_column("orders", "id")

        assert builder.get_sql() == "SELECT orders.*\nFROM orders;"

    def test_remove_table_drops_columns_and_joins(self) -> None:
        builder = SelectBuilder()
        builder.add_table("users")
        builder.add_table("orders")
        builder.toggle_column("orders", "total")
        builder.add_join(JoinSpec(JoinType.LEFT, "users", "id", "orders", "user_id"))

        builder.remove_table("orders")

        assert builder.joins == []
        assert "orders" not in builder.columns_by_table
        assert builder.get_sql() == "SELECT users.*\nFROM users;"

    def test_update_condition(self) -> None:
        builder = SelectBuilder()
        builder.add_table("users")
        builder.add_condition(Condition("users.age"))

        builder.update_condition(0, operator=Operator.LT, value="30")

        assert "WHERE users.age < 30" in builder.get_sql()

    def test_clear_resets_to_placeholder(self) -> None:
        builder = SelectBuilder()
        builder.add_table("users")
        builder.set_limit(10)

        builder.clear()

        assert builder.get_sql() == NO_TABLE_PLACEHOLDER
        assert builder.limit is None
