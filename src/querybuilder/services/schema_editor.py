"""스키마 편집 서비스.

SchemaAlterBuilder로 작업 목록을 만들고, 삭제 계열은 확인을 받은 뒤
한 번의 /alter.php 요청으로 제출한다. 결과는 Notifier로 알린다.
"""

import logging
from typing import Any, Callable, Optional

from querybuilder.builder.alter_builder import AlterOperation, ColumnForm, SchemaAlterBuilder
from querybuilder.builder.alter_renderer import render_alter_sql
from querybuilder.core.exceptions import ApiError, ValidationError
from querybuilder.core.models import ColumnMeta, ReferentialAction, TableSchema
from querybuilder.services.notifier import ConfirmOptions, NoticeKind, Notifier

logger = logging.getLogger(__name__)


class SchemaEditor:
    """테이블 하나에 대한 스키마 편집기."""

    def __init__(
        self,
        client: Any,
        notifier: Notifier,
        table: str,
        schema: TableSchema,
        database: Optional[str] = None,
        on_success: Optional[Callable[[], None]] = None,
    ) -> None:
        """편집기 초기화.

        Args:
            client: alter(table, operations, database)를 제공하는 API 클라이언트
            notifier: 알림/확인 UI
            table: 대상 테이블
            schema: 현재 테이블 스키마
            database: 대상 데이터베이스
            on_success: 변경 성공 후 호출할 콜백 (스키마 새로고침 등)
        """
        self._client = client
        self._notifier = notifier
        self._builder = SchemaAlterBuilder()
        self.table = table
        self.schema = schema
        self.database = database
        self._on_success = on_success

    def _column(self, name: str) -> ColumnMeta:
        column = self.schema.find_column(name)
        if column is None:
            raise ValidationError("Column not found")
        return column

    def preview(self, operations: list[AlterOperation]) -> str:
        """제출 전 ALTER TABLE 미리보기."""
        return render_alter_sql(self.table, operations)

    def _submit(
        self,
        build: Callable[[], list[AlterOperation]],
        success_message: str,
        failure_prefix: str,
    ) -> bool:
        """작업을 만들어 제출하고 결과를 알린다.

        Args:
            build: 작업 목록을 만드는 함수 (ValidationError 가능)
            success_message: 성공 알림 메시지
            failure_prefix: 실패 알림 접두사

        Returns:
            성공 여부
        """
        try:
            operations = build()
            if operations:
                logger.debug("ALTER preview: %s", self.preview(operations))
        except ValidationError as e:
            self._notifier.notify(NoticeKind.ERROR, str(e))
            return False

        if not operations:
            self._notifier.notify(NoticeKind.WARNING, "No changes to save")
            return False

        try:
            self._client.alter(self.table, operations, self.database)
        except ApiError as e:
            logger.error("ALTER failed for %s: %s", self.table, e.raw_message)
            self._notifier.notify(NoticeKind.ERROR, f"{failure_prefix}: {e}")
            return False

        self._notifier.notify(NoticeKind.SUCCESS, success_message)
        if self._on_success:
            self._on_success()
        return True

    def _confirm_drop(self, title: str, message: str, confirm_text: str = "Drop") -> bool:
        return self._notifier.confirm(
            ConfirmOptions(title=title, message=message, confirm_text=confirm_text, danger=True)
        )

    # 컬럼
    def add_column(self, form: ColumnForm) -> bool:
        return self._submit(
            lambda: self._builder.add_column(form),
            f'Column "{form.name}" added successfully',
            "Failed to add column",
        )

    def modify_column(self, column_name: str, form: ColumnForm) -> bool:
        return self._submit(
            lambda: self._builder.modify_column(self._column(column_name), form),
            "Schema updated successfully",
            "Failed to update schema",
        )

    def rename_column(self, column_name: str, new_name: str) -> bool:
        return self._submit(
            lambda: self._builder.rename_column(self._column(column_name), new_name),
            f'Column "{column_name}" renamed to "{new_name}"',
            "Failed to rename column",
        )

    def drop_column(self, column_name: str) -> bool:
        """컬럼 삭제 (확인 후 제출).

        Returns:
            제출하여 성공했으면 True, 취소/실패면 False
        """
        confirmed = self._confirm_drop(
            "Drop Column",
            f'Are you sure you want to drop the column "{column_name}"?\n\n'
            "This will permanently delete all data in this column.",
            confirm_text="Drop Column",
        )
        if not confirmed:
            return False
        return self._submit(
            lambda: self._builder.drop_column(column_name),
            f'Column "{column_name}" dropped successfully',
            "Failed to drop column",
        )

    def toggle_nullable(self, column_name: str) -> bool:
        column = self.schema.find_column(column_name)
        action = "allows" if column is not None and not column.nullable else "disallows"
        return self._submit(
            lambda: self._builder.toggle_nullable(self._column(column_name)),
            f'Column "{column_name}" now {action} NULL',
            "Failed to change NULL setting",
        )

    def set_default(self, column_name: str, value: Optional[str]) -> bool:
        return self._submit(
            lambda: self._builder.set_default(self._column(column_name), value),
            f'Default value set for "{column_name}"',
            "Failed to set default",
        )

    def remove_default(self, column_name: str) -> bool:
        return self._submit(
            lambda: self._builder.remove_default(self._column(column_name)),
            f'Default value removed from "{column_name}"',
            "Failed to remove default",
        )

    def set_comment(self, column_name: str, comment: Optional[str]) -> bool:
        return self._submit(
            lambda: self._builder.set_comment(self._column(column_name), comment),
            f'Comment {"updated" if comment else "removed"} for "{column_name}"',
            "Failed to update comment",
        )

    # 키/인덱스
    def change_primary_key(self, columns: list[str]) -> bool:
        return self._submit(
            lambda: self._builder.change_primary_key(columns, self.schema.primary_key),
            "Primary key updated successfully",
            "Failed to update primary key",
        )

    def add_index(
        self,
        columns: list[str],
        name: Optional[str] = None,
        unique: bool = False,
        index_type: str = "BTREE",
    ) -> bool:
        return self._submit(
            lambda: self._builder.add_index(columns, name, unique, index_type),
            "Index added successfully",
            "Failed to add index",
        )

    def drop_index(self, name: str) -> bool:
        if not self._confirm_drop("Drop Index", f'Are you sure you want to drop the index "{name}"?'):
            return False
        return self._submit(
            lambda: self._builder.drop_index(name),
            f'Index "{name}" dropped successfully',
            "Failed to drop index",
        )

    def add_foreign_key(
        self,
        column: str,
        ref_table: str,
        ref_column: str,
        name: Optional[str] = None,
        on_delete: Optional[ReferentialAction] = None,
        on_update: Optional[ReferentialAction] = None,
    ) -> bool:
        return self._submit(
            lambda: self._builder.add_foreign_key(
                column, ref_table, ref_column, name, on_delete, on_update
            ),
            "Foreign key added successfully",
            "Failed to add foreign key",
        )

    def drop_foreign_key(self, name: str) -> bool:
        if not self._confirm_drop(
            "Drop Foreign Key", f'Are you sure you want to drop the foreign key "{name}"?'
        ):
            return False
        return self._submit(
            lambda: self._builder.drop_foreign_key(name),
            f'Foreign key "{name}" dropped successfully',
            "Failed to drop foreign key",
        )

    # 테이블
    def rename_table(self, new_name: str) -> bool:
        succeeded = self._submit(
            lambda: self._builder.rename_table(new_name),
            f'Table renamed to "{new_name}"',
            "Failed to rename table",
        )
        if succeeded:
            self.table = new_name
            self.schema.table = new_name
        return succeeded

    def change_engine(self, engine: str) -> bool:
        return self._submit(
            lambda: self._builder.change_engine(engine),
            f"Storage engine changed to {engine}",
            "Failed to change engine",
        )

    def change_charset(self, charset: str, collation: str) -> bool:
        return self._submit(
            lambda: self._builder.change_charset(charset, collation),
            f"Charset changed to {charset} ({collation})",
            "Failed to change charset",
        )
