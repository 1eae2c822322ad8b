"""선택된 행 일괄 삭제 서비스."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from querybuilder.core.exceptions import ApiError, ValidationError
from querybuilder.services.notifier import ConfirmOptions, NoticeKind, Notifier

logger = logging.getLogger(__name__)


@dataclass
class DeleteProgress:
    """행 단위 진행 상황."""

    current: int
    total: int
    row_id: Any
    succeeded: bool


ProgressCallback = Callable[[DeleteProgress], None]


def _rows(count: int) -> str:
    return f"row{'s' if count > 1 else ''}"


@dataclass
class BulkDeleteResult:
    """일괄 삭제 결과."""

    deleted_count: int = 0
    failed_count: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    def summary(self) -> str:
        """사용자에게 보여줄 결과 요약."""
        if self.success:
            return f"{self.deleted_count} {_rows(self.deleted_count)} deleted successfully"
        return (
            f"Deleted {self.deleted_count} {_rows(self.deleted_count)}, "
            f"{self.failed_count} failed"
        )


class BulkRowDeleter:
    """행을 하나씩 순서대로 삭제한다.

    한 행의 실패가 나머지 삭제를 막지 않는다. 요청은 동시에 보내지 않는다.
    """

    def __init__(
        self,
        client: Any,
        notifier: Optional[Notifier] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Args:
            client: delete_row(table, row_id)를 제공하는 API 클라이언트
            notifier: 확인/결과 알림 UI (없으면 확인 없이 진행)
            progress_callback: 행마다 호출되는 진행 콜백
        """
        self._client = client
        self._notifier = notifier
        self._progress_callback = progress_callback

    def _confirm(self, count: int) -> bool:
        if self._notifier is None:
            return True
        return self._notifier.confirm(
            ConfirmOptions(
                title="Delete Selected Rows",
                message=(
                    f"Are you sure you want to delete {count} selected {_rows(count)}?\n\n"
                    "This action cannot be undone."
                ),
                confirm_text=f"Delete {count} {_rows(count).capitalize()}",
                danger=True,
            )
        )

    def delete(
        self,
        table: str,
        row_ids: Iterable[Any],
        primary_key: list[str],
    ) -> Optional[BulkDeleteResult]:
        """선택된 행들을 삭제.

        Args:
            table: 대상 테이블
            row_ids: 선택된 행 ID (선택 순서)
            primary_key: 테이블 기본 키 컬럼

        Returns:
            삭제 결과 (사용자가 취소하면 None)

        Raises:
            ValidationError: 선택된 행이 없거나 기본 키가 없을 때
        """
        ids = list(dict.fromkeys(row_ids))
        if not ids:
            raise ValidationError("No rows selected")
        if not primary_key:
            raise ValidationError("Cannot delete: table has no primary key")

        if not self._confirm(len(ids)):
            logger.info("Bulk delete on %s cancelled", table)
            return None

        result = BulkDeleteResult()
        for index, row_id in enumerate(ids, start=1):
            try:
                self._client.delete_row(table, row_id)
                result.deleted_count += 1
                succeeded = True
            except ApiError as e:
                result.failed_count += 1
                result.errors.append({"row_id": row_id, "error": str(e)})
                logger.warning("Failed to delete %s row %s: %s", table, row_id, e)
                succeeded = False

            if self._progress_callback:
                self._progress_callback(
                    DeleteProgress(current=index, total=len(ids), row_id=row_id, succeeded=succeeded)
                )

        if self._notifier is not None:
            kind = NoticeKind.SUCCESS if result.success else NoticeKind.WARNING
            self._notifier.notify(kind, result.summary())
        return result
