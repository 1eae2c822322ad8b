"""ConsoleNotifier 테스트."""

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from querybuilder.services.notifier import ConfirmOptions, ConsoleNotifier, NoticeKind


def make_console() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, force_terminal=False, width=120), buffer


class TestConsoleNotifier:
    """콘솔 알림 테스트."""

    def test_notify_prints_kind_and_message(self) -> None:
        console, buffer = make_console()

        ConsoleNotifier(console).notify(NoticeKind.ERROR, "Failed to drop column")

        assert "ERROR Failed to drop column" in buffer.getvalue()

    def test_assume_yes_skips_prompt(self) -> None:
        console, _ = make_console()
        notifier = ConsoleNotifier(console, assume_yes=True)

        with patch("querybuilder.services.notifier.Confirm.ask") as mock_ask:
            assert notifier.confirm(ConfirmOptions(title="Drop Index", message="Sure?")) is True
            mock_ask.assert_not_called()

    def test_confirm_asks_user(self) -> None:
        console, buffer = make_console()
        notifier = ConsoleNotifier(console)

        with patch("querybuilder.services.notifier.Confirm.ask", return_value=False) as mock_ask:
            confirmed = notifier.confirm(
                ConfirmOptions(title="Drop Column", message="Drop it?", confirm_text="Drop Column", danger=True)
            )

        assert confirmed is False
        mock_ask.assert_called_once()
        assert "Drop Column" in buffer.getvalue()
