"""Serial background worker with presentation-thread callbacks."""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import (
    QMutex, QMutexLocker, QObject, QRunnable, QThread, QThreadPool, pyqtSignal, pyqtSlot,
)

logger = logging.getLogger(__name__)

# --- Module-level constants ---
SHUTDOWN_WAIT_MS = 2000   # Default drain time when shutting down


class _CompletionRelay(QObject):
    """Lives on the presentation thread; queued emissions land there."""

    deliver = pyqtSignal(object, object)   # (callback, payload)

    def __init__(self):
        super().__init__()
        self.deliver.connect(self._on_deliver)

    @pyqtSlot(object, object)
    def _on_deliver(self, callback, payload):
        callback(payload)


class _TaskRunnable(QRunnable):
    """Runs one job on the worker thread and relays the outcome."""

    def __init__(self, target: Callable[[], Any], relay: _CompletionRelay,
                 on_success: Optional[Callable[[Any], None]],
                 on_error: Optional[Callable[[Exception], None]],
                 done: Callable[[], None]):
        super().__init__()
        self._target = target
        self._relay = relay
        self._on_success = on_success
        self._on_error = on_error
        self._done = done

    def run(self):
        try:
            result = self._target()
        except Exception as e:
            logger.exception("Background job failed")
            if self._on_error is not None:
                self._relay.deliver.emit(self._on_error, e)  # Full exception object
        else:
            if self._on_success is not None:
                self._relay.deliver.emit(self._on_success, result)
        finally:
            self._done()


class SerialTaskRunner:
    """
    Single worker context for background computation.

    Jobs run one at a time, in submission order, on a private thread pool
    capped at one thread. Success and error callbacks are always invoked on
    the presentation thread, which defaults to the thread that created the
    runner.

    Usage:
        self._runner = SerialTaskRunner()

        def reload(self):
            self._runner.submit(
                target=self.source.fetch,
                on_success=self._on_loaded,
                on_error=self._on_error,
            )

        def closeEvent(self, event):
            self._runner.shutdown()
            super().closeEvent(event)
    """

    def __init__(self, presentation_thread: Optional[QThread] = None):
        self._pool = QThreadPool()
        self._pool.setMaxThreadCount(1)
        self._pool.setExpiryTimeout(-1)  # Keep the worker thread alive
        self._relay = _CompletionRelay()
        if presentation_thread is not None:
            self._relay.moveToThread(presentation_thread)
        self._pending = 0
        self._mutex = QMutex()
        self._accepting = True

    @property
    def pending_count(self) -> int:
        """Jobs submitted but not yet finished."""
        with QMutexLocker(self._mutex):
            return self._pending

    def submit(
        self,
        target: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> bool:
        """
        Queue ``target`` on the worker thread.

        Args:
            target: Zero-argument callable executed in the background
            on_success: Receives the target's return value on the presentation thread
            on_error: Receives the raised exception on the presentation thread

        Returns:
            False if the runner has been shut down, True otherwise
        """
        if not self._accepting:
            logger.warning("Job submitted after shutdown, ignoring")
            return False
        with QMutexLocker(self._mutex):
            self._pending += 1
        self._pool.start(_TaskRunnable(target, self._relay, on_success, on_error, self._job_done))
        return True

    def _job_done(self):
        with QMutexLocker(self._mutex):
            self._pending -= 1

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until every queued job finished. Callbacks still need the event loop."""
        return self._pool.waitForDone(msecs)

    def shutdown(self, msecs: int = SHUTDOWN_WAIT_MS) -> bool:
        """Stop accepting jobs and wait for the queue to drain."""
        self._accepting = False
        return self._pool.waitForDone(msecs)
