"""Unit tests for the queue item lifecycle."""

import pytest

from screener.core.exceptions import InvalidTransitionError
from screener.schemas.batch import QueueItem, QueueStatus


def _item(status: QueueStatus = QueueStatus.PENDING) -> QueueItem:
    return QueueItem(id="resume-1", file_name="a.pdf", status=status)


@pytest.mark.unit
class TestQueueItemTransitions:
    def test_new_item_is_pending(self) -> None:
        item = QueueItem(id="resume-1", file_name="a.pdf")
        assert item.status is QueueStatus.PENDING
        assert item.error is None
        assert not item.is_terminal

    def test_happy_path(self) -> None:
        item = _item()
        assert item.advance(QueueStatus.PROCESSING)
        assert item.advance(QueueStatus.DONE)
        assert item.status is QueueStatus.DONE
        assert item.is_terminal

    def test_error_carries_reason(self) -> None:
        item = _item(QueueStatus.PROCESSING)
        item.advance(QueueStatus.ERROR, error="Request timed out")
        assert item.status is QueueStatus.ERROR
        assert item.error == "Request timed out"
        assert item.is_terminal

    def test_reason_dropped_outside_error(self) -> None:
        item = _item(QueueStatus.PROCESSING)
        item.advance(QueueStatus.DONE, error="ignored")
        assert item.error is None

    def test_pending_cannot_skip_processing(self) -> None:
        item = _item()
        assert item.advance(QueueStatus.DONE) is False
        assert item.status is QueueStatus.PENDING

    @pytest.mark.parametrize("terminal", [QueueStatus.DONE, QueueStatus.ERROR])
    @pytest.mark.parametrize("target", list(QueueStatus))
    def test_terminal_states_are_final(self, terminal: QueueStatus, target: QueueStatus) -> None:
        item = _item(terminal)
        assert item.advance(target) is False
        assert item.status is terminal

    def test_strict_mode_raises(self) -> None:
        item = _item(QueueStatus.DONE)
        with pytest.raises(InvalidTransitionError, match="cannot move from done to processing"):
            item.advance(QueueStatus.PROCESSING, strict=True)
        assert item.status is QueueStatus.DONE

    def test_lenient_mode_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        item = _item(QueueStatus.ERROR)
        item.advance(QueueStatus.DONE)
        assert "cannot move from error to done" in caplog.text
