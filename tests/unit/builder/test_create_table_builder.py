"""CREATE TABLE 빌더 테스트."""

import pytest

from querybuilder.builder.create_table_builder import (
    NO_COLUMNS,
    NO_TABLE_NAME,
    CreateTableBuilder,
    render_column_definition,
)
from querybuilder.core.config import Settings
from querybuilder.core.exceptions import ValidationError
from querybuilder.core.models import (
    ColumnDefinition,
    ColumnMeta,
    ForeignKeySpec,
    IndexSpec,
    IndexType,
    KeyType,
    ReferentialAction,
)


@pytest.fixture
def builder() -> CreateTableBuilder:
    """기본 옵션 빌더 fixture."""
    settings = Settings(
        default_engine="InnoDB",
        default_charset="utf8mb4",
        default_collation="utf8mb4_unicode_ci",
    )
    return CreateTableBuilder(settings)


class TestSentinels:
    """빈 상태 안내 문자열 테스트."""

    def test_no_table_name(self, builder: CreateTableBuilder) -> None:
        assert builder.get_sql() == NO_TABLE_NAME

    def test_no_columns(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("users")

        assert builder.get_sql() == NO_COLUMNS
        assert NO_COLUMNS != NO_TABLE_NAME

    def test_statement_once_column_exists(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("users")
        builder.add_column(ColumnDefinition(name="name", type="VARCHAR", length="50"))

        sql = builder.get_sql()

        assert sql.startswith("CREATE TABLE")
        assert sql.endswith(";")


class TestBuildSql:
    """CREATE TABLE 문 생성 테스트."""

    def test_templates_and_primary_key(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("users")
        builder.apply_template("id")
        builder.add_column(ColumnDefinition(name="name", type="VARCHAR", length="100", nullable=False))
        builder.apply_template("timestamps")

        assert builder.get_sql() == (
            "CREATE TABLE `users` (\n"
            "  `id` INT(11) UNSIGNED NOT NULL AUTO_INCREMENT,\n"
            "  `name` VARCHAR(100) NOT NULL,\n"
            "  `created_at` TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,\n"
            "  `updated_at` TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,\n"
            "  PRIMARY KEY (`id`)\n"
            ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;"
        )

    def test_unique_columns_indexes_and_foreign_keys(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("orders")
        builder.add_column(ColumnDefinition(name="code", type="CHAR", length="8", unique=True))
        builder.add_column(ColumnDefinition(name="user_id", type="INT"))
        builder.add_column(ColumnDefinition(name="memo", type="TEXT"))
        builder.add_index(IndexSpec(name="idx_user", columns=["user_id"]))
        builder.add_index(IndexSpec(name="ft_memo", columns=["memo"], type=IndexType.FULLTEXT))
        builder.add_foreign_key(ForeignKeySpec(
            name="fk_orders_user", column="user_id", ref_table="users", ref_column="id",
            on_delete=ReferentialAction.CASCADE,
        ))

        sql = builder.get_sql()

        assert "  UNIQUE KEY `code_unique` (`code`)" in sql
        assert "  KEY `idx_user` (`user_id`)" in sql
        assert "  FULLTEXT KEY `ft_memo` (`memo`)" in sql
        assert (
            "  CONSTRAINT `fk_orders_user` FOREIGN KEY (`user_id`) "
            "REFERENCES `users`(`id`) ON DELETE CASCADE"
        ) in sql
        assert "ON UPDATE" not in sql

    def test_composite_primary_key(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("order_items")
        builder.add_column(ColumnDefinition(name="order_id", type="INT", primary_key=True, nullable=False))
        builder.add_column(ColumnDefinition(name="item_id", type="INT", primary_key=True, nullable=False))

        assert "  PRIMARY KEY (`order_id`, `item_id`)" in builder.get_sql()

    def test_table_options(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("logs")
        builder.add_column(ColumnDefinition(name="line", type="TEXT"))
        builder.set_engine("MyISAM")
        builder.set_charset("latin1")
        builder.set_collation("latin1_swedish_ci")

        assert builder.get_sql().endswith(
            ") ENGINE=MyISAM DEFAULT CHARSET=latin1 COLLATE=latin1_swedish_ci;"
        )


class TestRenderColumnDefinition:
    """컬럼 정의 렌더링 테스트."""

    def test_comment_quote_is_backslash_escaped(self) -> None:
        column = ColumnDefinition(name="memo", type="VARCHAR", length="255", comment="customer's note")

        assert render_column_definition(column) == (
            "  `memo` VARCHAR(255) COMMENT 'customer\\'s note'"
        )

    def test_default_is_verbatim(self) -> None:
        column = ColumnDefinition(name="status", type="ENUM", enum_values="'a','b'", default_value="'a'")

        assert render_column_definition(column) == "  `status` ENUM('a','b') DEFAULT 'a'"


class TestColumnEditing:
    """컬럼 편집 테스트."""

    def test_name_is_required(self, builder: CreateTableBuilder) -> None:
        with pytest.raises(ValidationError, match="Column name is required"):
            builder.add_column(ColumnDefinition(name="  ", type="INT"))

    def test_duplicate_name_is_case_insensitive(self, builder: CreateTableBuilder) -> None:
        builder.add_column(ColumnDefinition(name="Email", type="VARCHAR"))

        with pytest.raises(ValidationError, match="already exists"):
            builder.add_column(ColumnDefinition(name="email", type="VARCHAR"))

    def test_update_column_keeps_own_name(self, builder: CreateTableBuilder) -> None:
        builder.add_column(ColumnDefinition(name="email", type="VARCHAR"))

        builder.update_column(0, ColumnDefinition(name="email", type="VARCHAR", length="320"))

        assert builder.columns[0].length == "320"

    def test_enum_length_moves_to_enum_values(self, builder: CreateTableBuilder) -> None:
        builder.add_column(ColumnDefinition(name="kind", type="ENUM", length="'a','b'"))

        assert builder.columns[0].length == ""
        assert builder.columns[0].enum_values == "'a','b'"

    def test_move_column(self, builder: CreateTableBuilder) -> None:
        for name in ("a", "b", "c"):
            builder.add_column(ColumnDefinition(name=name, type="INT"))

        builder.move_column(2, 0)

        assert [c.name for c in builder.columns] == ["c", "a", "b"]

    def test_template_skips_existing_names(self, builder: CreateTableBuilder) -> None:
        assert builder.apply_template("timestamps") == ["created_at", "updated_at"]
        assert builder.apply_template("timestamps") == []

    def test_unknown_template(self, builder: CreateTableBuilder) -> None:
        with pytest.raises(ValidationError):
            builder.apply_template("audit")

    def test_clone_structure(self, builder: CreateTableBuilder) -> None:
        builder.clone_structure([
            ColumnMeta(name="id", data_type="int", column_type="int(10) unsigned",
                       nullable=False, key_type=KeyType.PRIMARY, extra="auto_increment"),
            ColumnMeta(name="kind", data_type="enum", column_type="enum('x','y')",
                       default_value="x", key_type=KeyType.UNIQUE),
        ])

        first, second = builder.columns
        assert (first.type, first.length, first.unsigned, first.auto_increment, first.primary_key) == (
            "INT", "10", True, True, True
        )
        assert (second.type, second.enum_values, second.unique, second.default_value) == (
            "ENUM", "'x','y'", True, "x"
        )


class TestIndexAndForeignKeyValidation:
    """인덱스/외래 키 검증 테스트."""

    def test_index_requires_name_and_columns(self, builder: CreateTableBuilder) -> None:
        with pytest.raises(ValidationError, match="Index name is required"):
            builder.add_index(IndexSpec(name="", columns=["a"]))
        with pytest.raises(ValidationError, match="at least one column"):
            builder.add_index(IndexSpec(name="idx_a", columns=[]))

    def test_foreign_key_requires_all_fields(self, builder: CreateTableBuilder) -> None:
        with pytest.raises(ValidationError, match="Constraint name is required"):
            builder.add_foreign_key(ForeignKeySpec(name="", column="a", ref_table="t", ref_column="id"))
        with pytest.raises(ValidationError, match="Select a column"):
            builder.add_foreign_key(ForeignKeySpec(name="fk", column="", ref_table="t", ref_column="id"))
        with pytest.raises(ValidationError, match="reference table and column"):
            builder.add_foreign_key(ForeignKeySpec(name="fk", column="a", ref_table="t", ref_column=""))

    def test_validate(self, builder: CreateTableBuilder) -> None:
        with pytest.raises(ValidationError, match="table name"):
            builder.validate()

        builder.set_table_name("t")
        with pytest.raises(ValidationError, match="at least one column"):
            builder.validate()

    def test_clear_restores_defaults(self, builder: CreateTableBuilder) -> None:
        builder.set_table_name("t")
        builder.set_engine("MyISAM")
        builder.add_column(ColumnDefinition(name="a", type="INT"))

        builder.clear()

        assert builder.get_sql() == NO_TABLE_NAME
        assert builder.engine == "InnoDB"
