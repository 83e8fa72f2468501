"""Base worker class with standard signals for background operations."""

from __future__ import annotations

import logging
from threading import Event

from PySide6.QtCore import QObject, Signal

from wavecode.errors import format_error_for_user

logger = logging.getLogger(__name__)


class BaseWorker(QObject):
    """Runs one job and reports it through signals.

    Subclasses implement ``_work``. ``run`` emits ``started``, then exactly
    one of ``error``, ``cancelled`` or ``finished``. It can be called from a
    QThread or directly in the calling thread:

        worker = RenderWorker(codes, theme)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(thread.quit)
        thread.start()
    """

    started = Signal()
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # result data
    error = Signal(str)                 # error message
    cancelled = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cancel_event = Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def _is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> None:
        self.started.emit()
        try:
            result = self._work()
        except Exception as e:
            logger.warning("%s failed: %s", type(self).__name__, e)
            self.error.emit(format_error_for_user(e))
            return

        if self._was_cancelled(result):
            self.cancelled.emit()
            return
        self.finished.emit(result)

    def _work(self) -> object:
        """Override in subclass; the return value is emitted with ``finished``."""
        raise NotImplementedError

    def _was_cancelled(self, result: object) -> bool:
        return self._is_cancelled
