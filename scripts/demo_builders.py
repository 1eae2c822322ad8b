#!/usr/bin/env python
"""빌더 데모 스크립트.

각 SQL 빌더가 만드는 미리보기 SQL을 출력합니다. 백엔드 연결은 필요 없습니다.

사용법:
    python scripts/demo_builders.py select     # SELECT 조립 데모
    python scripts/demo_builders.py dml        # UPDATE/DELETE/INSERT 데모
    python scripts/demo_builders.py create     # CREATE TABLE 데모
    python scripts/demo_builders.py alter      # ALTER 작업 데모
    python scripts/demo_builders.py all        # 전체
"""

import argparse
import json
import sys
from pathlib import Path

# 프로젝트 루트 경로 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from querybuilder.builder.alter_builder import ColumnForm, SchemaAlterBuilder
from querybuilder.builder.alter_renderer import render_alter_sql
from querybuilder.builder.create_table_builder import CreateTableBuilder
from querybuilder.builder.dml_builder import (
    DeleteBuilder,
    InsertBuilder,
    UpdateBuilder,
    build_delete_where,
)
from querybuilder.builder.select_builder import SelectBuilder
from querybuilder.core.config import Settings
from querybuilder.core.log_config import configure_logging
from querybuilder.core.models import (
    ColumnDefinition,
    ColumnMeta,
    Condition,
    Connector,
    ForeignKeySpec,
    JoinSpec,
    JoinType,
    KeyType,
    Operator,
    OrderBy,
    ReferentialAction,
    SortDirection,
)

console = Console()

SAMPLE_COLUMNS = [
    ColumnMeta(name="id", data_type="int", column_type="int(11) unsigned",
               nullable=False, key_type=KeyType.PRIMARY, extra="auto_increment"),
    ColumnMeta(name="name", data_type="varchar", column_type="varchar(100)", nullable=False),
    ColumnMeta(name="age", data_type="int", column_type="int(11)"),
    ColumnMeta(name="status", data_type="enum", column_type="enum('active','inactive')",
               nullable=False, default_value="active"),
]


def show_sql(title: str, sql: str) -> None:
    console.print(Panel(Syntax(sql, "sql", word_wrap=True), title=title, border_style="cyan"))


def demo_select() -> None:
    """SELECT 빌더 데모."""
    builder = SelectBuilder()
    builder.add_table("users")
    builder.add_table("orders")
    builder.toggle_column("users", "name")
    builder.add_join(JoinSpec(JoinType.LEFT, "users", "id", "orders", "user_id"))
    builder.add_condition(Condition("users.age", Operator.GT, "18"))
    builder.add_condition(Condition("users.name", Operator.LIKE, "J%", Connector.OR))
    builder.add_order_by(OrderBy("users.name", SortDirection.DESC))
    builder.set_limit(10)
    builder.set_offset(20)
    show_sql("SELECT", builder.get_sql())


def demo_dml() -> None:
    """UPDATE / DELETE / INSERT 데모."""
    update = UpdateBuilder()
    update.select_table("users", SAMPLE_COLUMNS)
    update.set_value("name", "O'Brien")
    update.set_value("age", is_null=True)
    update.add_condition(Condition("id", Operator.EQ, "5"))
    show_sql("UPDATE", update.get_sql())

    delete = DeleteBuilder()
    delete.select_table("users", SAMPLE_COLUMNS)
    show_sql("DELETE (WHERE 없음)", delete.get_sql())
    if delete.has_unscoped_where():
        console.print("[yellow]⚠ WHERE 절이 없어 모든 행이 삭제됩니다[/yellow]")

    insert = InsertBuilder()
    insert.select_table("users", SAMPLE_COLUMNS)
    insert.add_row({"name": "Kim", "age": "30", "status": ""})
    insert.add_row({"name": "Lee", "age": None, "status": "inactive"})
    show_sql("INSERT", insert.get_sql())

    statement = build_delete_where(
        "users", [Condition("status", Operator.IN, ["inactive", "banned"])]
    )
    show_sql("DELETE (parameterized)", statement.sql)
    console.print(json.dumps(statement.params, ensure_ascii=False))


def demo_create(settings: Settings) -> None:
    """CREATE TABLE 데모."""
    builder = CreateTableBuilder(settings)
    builder.set_table_name("orders")
    builder.apply_template("id")
    builder.add_column(ColumnDefinition(name="user_id", type="INT", length="11",
                                        nullable=False, unsigned=True))
    builder.add_column(ColumnDefinition(name="memo", type="VARCHAR", length="255",
                                        comment="customer's note"))
    builder.apply_template("timestamps")
    builder.add_foreign_key(ForeignKeySpec(
        name="fk_orders_user", column="user_id", ref_table="users", ref_column="id",
        on_delete=ReferentialAction.CASCADE,
    ))
    show_sql("CREATE TABLE", builder.get_sql())


def demo_alter() -> None:
    """ALTER 작업 데모."""
    builder = SchemaAlterBuilder()
    operations = []
    operations += builder.add_column(ColumnForm(name="email", length="255", nullable=False,
                                                position="AFTER name"))
    operations += builder.toggle_nullable(SAMPLE_COLUMNS[0])
    operations += builder.change_primary_key(["id", "name"], ["id"])
    operations += builder.add_index(["email"], unique=True)

    for op in operations:
        console.print(json.dumps(op.to_payload(), ensure_ascii=False))
    show_sql("ALTER TABLE (preview)", render_alter_sql("users", operations))


def main():
    """메인 함수."""
    parser = argparse.ArgumentParser(
        description="SQL 빌더 데모",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "demo",
        choices=["select", "dml", "create", "alter", "all"],
        help="실행할 데모",
    )
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings)

    if args.demo in ("select", "all"):
        demo_select()
    if args.demo in ("dml", "all"):
        demo_dml()
    if args.demo in ("create", "all"):
        demo_create(settings)
    if args.demo in ("alter", "all"):
        demo_alter()


if __name__ == "__main__":
    main()
