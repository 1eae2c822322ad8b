"""SchemaEditor 서비스 테스트."""

from unittest.mock import MagicMock

import pytest

from querybuilder.builder.alter_builder import AlterOperationType, ColumnForm
from querybuilder.core.exceptions import ApiError
from querybuilder.core.models import ColumnMeta, KeyType, TableSchema
from querybuilder.services.notifier import NoticeKind
from querybuilder.services.schema_editor import SchemaEditor


@pytest.fixture
def users_schema() -> TableSchema:
    """users 테이블 스키마 fixture."""
    return TableSchema(
        table="users",
        columns=[
            ColumnMeta(name="id", data_type="int", column_type="int(11)", nullable=False,
                       key_type=KeyType.PRIMARY, extra="auto_increment"),
            ColumnMeta(name="email", data_type="varchar", column_type="varchar(255)", nullable=False),
        ],
        primary_key=["id"],
    )


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_notifier() -> MagicMock:
    notifier = MagicMock()
    notifier.confirm.return_value = True
    return notifier


@pytest.fixture
def editor(mock_client: MagicMock, mock_notifier: MagicMock, users_schema: TableSchema) -> SchemaEditor:
    return SchemaEditor(mock_client, mock_notifier, "users", users_schema, database="shop")


def submitted_types(mock_client: MagicMock) -> list[str]:
    operations = mock_client.alter.call_args[0][1]
    return [op.type.value for op in operations]


class TestSubmission:
    """작업 제출 테스트."""

    def test_toggle_nullable_submits_one_batch(
        self, editor: SchemaEditor, mock_client: MagicMock, mock_notifier: MagicMock
    ) -> None:
        """작업 목록을 한 번의 요청으로 제출하고 성공을 알려야 함."""
        # When
        result = editor.toggle_nullable("email")

        # Then
        assert result is True
        mock_client.alter.assert_called_once()
        table, operations, database = mock_client.alter.call_args[0]
        assert (table, database) == ("users", "shop")
        assert operations[0].to_payload()["definition"]["nullable"] is True
        mock_notifier.notify.assert_called_once_with(
            NoticeKind.SUCCESS, 'Column "email" now allows NULL'
        )

    def test_change_primary_key_sends_drop_then_add(
        self, editor: SchemaEditor, mock_client: MagicMock
    ) -> None:
        editor.change_primary_key(["id", "email"])

        assert submitted_types(mock_client) == ["DROP_PRIMARY_KEY", "ADD_PRIMARY_KEY"]

    def test_on_success_callback(
        self, mock_client: MagicMock, mock_notifier: MagicMock, users_schema: TableSchema
    ) -> None:
        on_success = MagicMock()
        editor = SchemaEditor(mock_client, mock_notifier, "users", users_schema, on_success=on_success)

        editor.add_column(ColumnForm(name="nickname"))

        on_success.assert_called_once()
        assert submitted_types(mock_client) == [AlterOperationType.ADD_COLUMN.value]


class TestValidationAndErrors:
    """검증 실패와 API 에러 테스트."""

    def test_validation_error_blocks_submission(
        self, editor: SchemaEditor, mock_client: MagicMock, mock_notifier: MagicMock
    ) -> None:
        """검증에 실패하면 요청을 보내지 않아야 함."""
        result = editor.set_default("id", "1")

        assert result is False
        mock_client.alter.assert_not_called()
        kind, message = mock_notifier.notify.call_args[0]
        assert kind == NoticeKind.ERROR
        assert "Auto-increment" in message

    def test_unknown_column(
        self, editor: SchemaEditor, mock_client: MagicMock, mock_notifier: MagicMock
    ) -> None:
        assert editor.set_comment("missing", "x") is False
        mock_client.alter.assert_not_called()
        mock_notifier.notify.assert_called_once_with(NoticeKind.ERROR, "Column not found")

    def test_invalid_table_name_is_reported(
        self, mock_client: MagicMock, mock_notifier: MagicMock, users_schema: TableSchema
    ) -> None:
        """테이블명이 식별자 규칙에 맞지 않으면 예외 대신 에러 알림을 보내야 함."""
        # Given: 하이픈이 들어간 테이블명
        editor = SchemaEditor(mock_client, mock_notifier, "order-items", users_schema)

        # When
        result = editor.toggle_nullable("email")

        # Then
        assert result is False
        mock_client.alter.assert_not_called()
        kind, message = mock_notifier.notify.call_args[0]
        assert kind == NoticeKind.ERROR
        assert "Invalid table name" in message

    def test_api_error_is_reported(
        self, editor: SchemaEditor, mock_client: MagicMock, mock_notifier: MagicMock
    ) -> None:
        mock_client.alter.side_effect = ApiError("Database error: Duplicate column name 'email'")

        result = editor.add_column(ColumnForm(name="email"))

        assert result is False
        mock_notifier.notify.assert_called_once_with(
            NoticeKind.ERROR, "Failed to add column: Duplicate column name 'email'"
        )


class TestDropConfirmation:
    """삭제 확인 테스트."""

    def test_cancelled_drop_is_not_submitted(
        self, editor: SchemaEditor, mock_client: MagicMock, mock_notifier: MagicMock
    ) -> None:
        mock_notifier.confirm.return_value = False

        assert editor.drop_column("email") is False
        mock_client.alter.assert_not_called()
        options = mock_notifier.confirm.call_args[0][0]
        assert options.title == "Drop Column"
        assert options.danger

    def test_confirmed_drops(self, editor: SchemaEditor, mock_client: MagicMock) -> None:
        assert editor.drop_index("idx_email") is True
        assert editor.drop_foreign_key("fk_users_org") is True

        types = [call[0][1][0].type.value for call in mock_client.alter.call_args_list]
        assert types == ["DROP_INDEX", "DROP_FOREIGN_KEY"]


class TestTableOperations:
    """테이블 단위 작업 테스트."""

    def test_rename_table_updates_target(self, editor: SchemaEditor) -> None:
        assert editor.rename_table("members") is True

        assert editor.table == "members"
        assert editor.schema.table == "members"

    def test_preview(self, editor: SchemaEditor) -> None:
        operations = editor._builder.drop_column("email")

        assert editor.preview(operations) == "ALTER TABLE `users` DROP COLUMN `email`;"
