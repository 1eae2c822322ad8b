"""사용자 알림/확인 인터페이스."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Confirm


class NoticeKind(Enum):
    """알림 종류."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ConfirmOptions:
    """확인 대화상자 옵션."""

    title: str
    message: str
    confirm_text: str = "Confirm"
    danger: bool = False


class Notifier(Protocol):
    """알림 표시와 확인 요청을 담당하는 UI 경계."""

    def notify(self, kind: NoticeKind, message: str) -> None:
        ...

    def confirm(self, options: ConfirmOptions) -> bool:
        ...


NOTICE_STYLES = {
    NoticeKind.SUCCESS: "green",
    NoticeKind.ERROR: "bold red",
    NoticeKind.WARNING: "yellow",
    NoticeKind.INFO: "cyan",
}


class ConsoleNotifier:
    """rich 콘솔 기반 Notifier."""

    def __init__(self, console: Optional[Console] = None, assume_yes: bool = False) -> None:
        """
        Args:
            console: 출력 콘솔 (없으면 새로 생성)
            assume_yes: True면 확인 없이 진행
        """
        self._console = console or Console()
        self._assume_yes = assume_yes

    def notify(self, kind: NoticeKind, message: str) -> None:
        style = NOTICE_STYLES[kind]
        self._console.print(f"[{style}]{kind.value.upper()}[/{style}] {message}")

    def confirm(self, options: ConfirmOptions) -> bool:
        if self._assume_yes:
            return True
        style = "bold red" if options.danger else "bold"
        self._console.print(f"[{style}]{options.title}[/{style}]")
        return Confirm.ask(
            f"{options.message} ({options.confirm_text}?)",
            console=self._console,
            default=False,
        )
