"""
Log session orchestrator.

Owns the authoritative log set, the displayed subset and the filter
criteria. Loading, filtering and searching run on a single serial worker;
results come back to the presentation thread through Qt signals and
optional completion callbacks.
"""

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QMutex, QMutexLocker, QObject, pyqtSignal

from logscope.core.background_task import SerialTaskRunner
from logscope.core.debounce_timer import DebouncedExecutor
from logscope.models.filter_criteria import FilterCriteria, TimeWindow
from logscope.models.log_entry import LogEntry
from logscope.models.selected_option import SelectedOption, build_options, normalize_options
from logscope.protocols.log_manager import LogManagerProtocol, get_log_manager
from logscope.protocols.session_config import LogSessionConfig, get_session_config
from logscope.services.filter_engine import FilterEngine

logger = logging.getLogger(__name__)

OptionLists = Tuple[List[SelectedOption], List[SelectedOption]]


def discover_options(logs: Sequence[LogEntry]) -> OptionLists:
    """Collect distinct flags and modules in one pass and build option lists."""
    flags = set()
    modules = set()
    for entry in logs:
        flags.add(entry.flag)
        modules.add(entry.module)
    return build_options(flags), build_options(modules)


class LogSession(QObject):
    """
    View-model for one log inspection session.

    Signals:
        data_ready: load() finished
        filter_changed: refresh() finished, carries the displayed entries
        search_finished: search() finished, carries the matching entries
        error_occurred: a background job raised, carries the exception

    Usage:
        session = LogSession(log_manager=manager)
        session.data_ready.connect(view.reload)
        session.load()

        # Live typing previews are debounced, explicit commits are not
        search_field.textChanged.connect(lambda text: session.search(text, False, view.show_results))
        session.update_flags(popover.flag_options())
        session.refresh(execute_immediately=True, completion=view.reload)
    """

    data_ready = pyqtSignal()
    filter_changed = pyqtSignal(list)
    search_finished = pyqtSignal(list)
    error_occurred = pyqtSignal(Exception)

    def __init__(
        self,
        log_manager: Optional[LogManagerProtocol] = None,
        config: Optional[LogSessionConfig] = None,
        runner: Optional[SerialTaskRunner] = None,
        engine: Optional[FilterEngine] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        if log_manager is None:
            log_manager = get_log_manager()
        if log_manager is None:
            raise ValueError("LogSession needs a log manager; pass one or call register_log_manager()")

        self._config = config or get_session_config()
        self._log_manager = log_manager
        self._engine = engine or FilterEngine()
        self._runner = runner or SerialTaskRunner()
        self._refresh_debouncer = DebouncedExecutor(self._config.debounce_interval)
        self._search_debouncer = DebouncedExecutor(self._config.effective_search_interval)

        # Guards everything below; written by the worker, read by the presentation thread
        self._mutex = QMutex()
        self._integral_logs: List[LogEntry] = []
        self._displayed_logs: List[LogEntry] = []
        self._criteria = FilterCriteria()
        self._loaded_date: Optional[date] = None
        self._date_changed = False
        # Bumped by update_time_window so a load can tell the window moved meanwhile
        self._window_generation = 0

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def integral_logs(self) -> List[LogEntry]:
        """Full candidate set for the active date, most recent first."""
        with QMutexLocker(self._mutex):
            return list(self._integral_logs)

    @property
    def displayed_logs(self) -> List[LogEntry]:
        with QMutexLocker(self._mutex):
            return list(self._displayed_logs)

    @property
    def criteria(self) -> FilterCriteria:
        """Snapshot of the stored criteria."""
        with QMutexLocker(self._mutex):
            return self._criteria.copy()

    @property
    def date_changed(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._date_changed

    @property
    def is_loading(self) -> bool:
        return self._runner.pending_count > 0

    # ------------------------------------------------------------------
    # Background operations
    # ------------------------------------------------------------------

    def load(self, day: Optional[date] = None, completion: Optional[Callable[[], None]] = None):
        """
        Load the authoritative set and rebuild the criteria.

        Args:
            day: Date to read from the log manager, None for the live buffer
            completion: Called on the presentation thread once loading finished
        """
        with QMutexLocker(self._mutex):
            generation = self._window_generation

        def job():
            logs = self._fetch(day)
            logs.reverse()
            flag_options, module_options = discover_options(logs)

            with QMutexLocker(self._mutex):
                if self._window_generation != generation:
                    # A window picked while loading wins; it is reloaded on the next refresh
                    window = self._criteria.time_window
                else:
                    window = TimeWindow.for_date(day) if day is not None else TimeWindow.unbounded()
                criteria = FilterCriteria(
                    time_window=window, flag_options=flag_options, module_options=module_options,
                )
                self._integral_logs = logs
                self._displayed_logs = list(logs)
                self._criteria = criteria
                self._loaded_date = day
                self._date_changed = window.date != day

            logger.debug(
                f"Loaded {len(logs)} entries for {day or 'current session'} "
                f"({len(criteria.flag_options) - 1} flags, {len(criteria.module_options) - 1} modules)"
            )

        def deliver(_):
            self.data_ready.emit()
            if completion is not None:
                completion()

        self._runner.submit(target=job, on_success=deliver, on_error=self._on_job_failed)

    def search(
        self,
        keyword: Optional[str],
        execute_immediately: bool = False,
        completion: Optional[Callable[[List[LogEntry]], None]] = None,
    ):
        """
        Keyword-only query against the authoritative set.

        Ignores every other criteria dimension and leaves the displayed
        subset and stored criteria untouched.

        Args:
            keyword: Literal, case-sensitive substring; empty matches everything
            execute_immediately: Dispatch now instead of debouncing
            completion: Receives the matching entries on the presentation thread
        """
        def job():
            with QMutexLocker(self._mutex):
                logs = self._integral_logs
            return self._engine.search(keyword, logs)

        def deliver(results):
            self.search_finished.emit(results)
            if completion is not None:
                completion(results)

        def dispatch():
            self._runner.submit(target=job, on_success=deliver, on_error=self._on_job_failed)

        self._dispatch(self._search_debouncer, dispatch, execute_immediately)

    def refresh(self, execute_immediately: bool = False, completion: Optional[Callable[[], None]] = None):
        """
        Recompute the displayed subset from the stored criteria.

        A pending date change reloads the authoritative set first.

        Args:
            execute_immediately: Dispatch now instead of debouncing
            completion: Called on the presentation thread once the subset is updated
        """
        def deliver(results):
            self.filter_changed.emit(results)
            if completion is not None:
                completion()

        def dispatch():
            self._runner.submit(target=self._refresh_job, on_success=deliver, on_error=self._on_job_failed)

        self._dispatch(self._refresh_debouncer, dispatch, execute_immediately)

    def _refresh_job(self) -> List[LogEntry]:
        with QMutexLocker(self._mutex):
            reload_date = self._criteria.date if self._date_changed else None
            if reload_date is not None:
                self._date_changed = False

        if reload_date is not None:
            logs = self._fetch(reload_date)
            logs.reverse()
            flag_options, module_options = discover_options(logs)
            with QMutexLocker(self._mutex):
                self._integral_logs = logs
                self._criteria.flag_options = flag_options
                self._criteria.module_options = module_options
                self._loaded_date = reload_date
            logger.debug(f"Reloaded {len(logs)} entries for {reload_date}")

        with QMutexLocker(self._mutex):
            criteria = self._criteria.copy()
            logs = self._integral_logs

        result = self._engine.apply(criteria, logs)

        with QMutexLocker(self._mutex):
            self._displayed_logs = result
        return list(result)

    @staticmethod
    def _dispatch(debouncer: DebouncedExecutor, dispatch: Callable[[], None], execute_immediately: bool):
        if execute_immediately:
            dispatch()
        else:
            debouncer.execute(dispatch)

    def _fetch(self, day: Optional[date]) -> List[LogEntry]:
        try:
            if day is None:
                logs = self._log_manager.current_logs()
            else:
                logs = self._log_manager.logs_for_date(day)
        except Exception:
            logger.exception(f"Log manager failed for {day or 'current session'}, treating as no data")
            return []
        return list(logs or [])

    def _on_job_failed(self, error: Exception):
        logger.error(f"Log session job failed: {error}")
        self.error_occurred.emit(error)

    # ------------------------------------------------------------------
    # Criteria mutators
    # ------------------------------------------------------------------

    def update_keyword(self, keyword: Optional[str]):
        with QMutexLocker(self._mutex):
            self._criteria.keyword = keyword

    def update_flags(self, options: Sequence[SelectedOption]):
        normalized = normalize_options(options)
        with QMutexLocker(self._mutex):
            self._criteria.flag_options = normalized

    def update_modules(self, options: Sequence[SelectedOption]):
        normalized = normalize_options(options)
        with QMutexLocker(self._mutex):
            self._criteria.module_options = normalized

    def update_time_window(self, window: TimeWindow):
        """Store a new time window; a different date is reloaded on the next refresh."""
        with QMutexLocker(self._mutex):
            self._date_changed = window.date != self._loaded_date
            self._criteria.time_window = window
            self._window_generation += 1

    def reverse_display_order(self):
        """
        Reverse the displayed subset in place.

        Presentation-only: the authoritative set and the criteria are left
        alone, so the next refresh restores most-recent-first order.
        """
        with QMutexLocker(self._mutex):
            self._displayed_logs.reverse()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> bool:
        """Drop pending debounced work and drain the worker."""
        self._refresh_debouncer.cancel()
        self._search_debouncer.cancel()
        return self._runner.shutdown(self._config.worker_wait_ms)
