"""Tests for the LogSession orchestrator."""

import threading
from datetime import date, datetime

import pytest
from PyQt6.QtTest import QTest

from conftest import wait_until
from logscope.models import LogEntry, SelectedOption, TimeWindow
from logscope.protocols import LogSessionConfig, register_log_manager
from logscope.services import FilterEngine, LogSession

DAY = date(2024, 3, 5)
OTHER_DAY = date(2024, 3, 6)


def at(day, hour):
    return datetime(day.year, day.month, day.day, hour).timestamp()


class FakeLogManager:
    """Log manager returning canned chronological entries."""

    def __init__(self, current=None, by_date=None, fail=False):
        self.current = current or []
        self.by_date = by_date or {}
        self.fail = fail
        self.date_requests = []

    def current_logs(self):
        if self.fail:
            raise OSError("disk gone")
        return list(self.current)

    def logs_for_date(self, day):
        self.date_requests.append(day)
        if self.fail:
            raise OSError("disk gone")
        return self.by_date.get(day)


class BlockingLogManager(FakeLogManager):
    """Holds the worker inside logs_for_date until released."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.entered = threading.Event()
        self.release = threading.Event()

    def logs_for_date(self, day):
        self.entered.set()
        self.release.wait(5)
        return super().logs_for_date(day)


class FailingEngine(FilterEngine):
    def apply(self, criteria, logs):
        raise RuntimeError("filter exploded")


def chronological(flags):
    return [LogEntry(i, flag, f"mod{i % 2}", f"message {i}") for i, flag in enumerate(flags)]


@pytest.fixture
def make_session(qapp):
    sessions = []

    def factory(manager, interval=0.05):
        session = LogSession(log_manager=manager, config=LogSessionConfig(debounce_interval=interval))
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.close()


def load(session, day=None):
    done = []
    session.load(day, completion=lambda: done.append(True))
    assert wait_until(lambda: done)


def refresh(session):
    done = []
    session.refresh(execute_immediately=True, completion=lambda: done.append(True))
    assert wait_until(lambda: done)


def test_load_discovers_options_and_reverses(make_session):
    entries = chronological(["info", "info", "error", "warn", "error"])
    session = make_session(FakeLogManager(current=entries))
    ready = []
    session.data_ready.connect(lambda: ready.append(True))

    load(session)

    criteria = session.criteria
    assert criteria.flag_options[0].is_all and criteria.flag_options[0].is_selected
    assert [o.value for o in criteria.flag_options[1:]] == ["error", "info", "warn"]
    assert [o.value for o in criteria.module_options[1:]] == ["mod0", "mod1"]
    assert session.displayed_logs == list(reversed(entries))
    assert session.integral_logs == list(reversed(entries))
    assert ready == [True]


def test_load_empty_resets_options(make_session):
    manager = FakeLogManager(current=chronological(["info"]))
    session = make_session(manager)
    load(session)
    manager.current = []

    load(session)

    criteria = session.criteria
    assert len(criteria.flag_options) == 1 and criteria.flag_options[0].is_all
    assert len(criteria.module_options) == 1 and criteria.module_options[0].is_all
    assert session.integral_logs == []
    assert session.displayed_logs == []


def test_load_for_date(make_session):
    entries = [LogEntry(at(DAY, h), "info", "net", f"at {h}") for h in (8, 9)]
    manager = FakeLogManager(by_date={DAY: entries})
    session = make_session(manager)

    load(session, DAY)

    assert manager.date_requests == [DAY]
    assert session.displayed_logs == list(reversed(entries))
    assert session.criteria.date == DAY


def test_load_missing_date_is_empty(make_session):
    session = make_session(FakeLogManager())
    load(session, DAY)
    assert session.displayed_logs == []


def test_collaborator_failure_is_no_data(make_session):
    session = make_session(FakeLogManager(current=chronological(["info"]), fail=True))
    errors = []
    session.error_occurred.connect(errors.append)
    load(session)
    assert session.integral_logs == []
    assert errors == []


def test_refresh_before_load_yields_empty(make_session):
    session = make_session(FakeLogManager(current=chronological(["info"])))
    results = []
    session.filter_changed.connect(results.append)
    refresh(session)
    assert results == [[]]
    assert session.displayed_logs == []


def test_refresh_applies_all_criteria(make_session):
    entries = chronological(["info", "error", "error", "warn"])
    session = make_session(FakeLogManager(current=entries))
    load(session)

    session.update_flags([SelectedOption.all(False), SelectedOption("error", True)])
    session.update_modules([SelectedOption.all(False), SelectedOption("mod0", True)])
    session.update_time_window(TimeWindow(0, 10))
    refresh(session)

    assert [e.timestamp for e in session.displayed_logs] == [2]
    assert session.integral_logs == list(reversed(entries))


def test_refresh_keyword(make_session):
    entries = [
        LogEntry(1, "info", "net", "connect timeout"),
        LogEntry(2, "info", "net", "ok"),
        LogEntry(3, "info", "net", "read timeout"),
    ]
    session = make_session(FakeLogManager(current=entries))
    load(session)
    session.update_keyword("timeout")
    refresh(session)
    assert [e.safe_message for e in session.displayed_logs] == ["read timeout", "connect timeout"]


def test_debounced_refresh_runs_once_per_burst(make_session):
    session = make_session(FakeLogManager(current=chronological(["info", "error"])), interval=0.05)
    load(session)
    results = []
    completions = []
    session.filter_changed.connect(results.append)

    for keyword in ["m", "me", "message 1"]:
        session.update_keyword(keyword)
        session.refresh(completion=lambda: completions.append(True))
        QTest.qWait(5)

    assert results == []
    assert wait_until(lambda: results)
    QTest.qWait(150)
    assert len(results) == 1
    assert len(completions) == 1
    assert [e.safe_message for e in results[0]] == ["message 1"]


def test_immediate_refresh_runs_every_call(make_session):
    session = make_session(FakeLogManager(current=chronological(["info"])))
    load(session)
    results = []
    session.filter_changed.connect(results.append)

    for _ in range(3):
        session.refresh(execute_immediately=True)

    assert wait_until(lambda: len(results) == 3)
    QTest.qWait(100)
    assert len(results) == 3


def test_search_is_keyword_only_and_leaves_view_alone(make_session):
    entries = [
        LogEntry(1, "error", "db", "connect timeout"),
        LogEntry(2, "info", "net", "ok"),
        LogEntry(3, "info", "net", "read timeout"),
    ]
    session = make_session(FakeLogManager(current=entries))
    load(session)
    session.update_flags([SelectedOption.all(False), SelectedOption("info", True)])
    refresh(session)
    displayed = session.displayed_logs
    criteria = session.criteria

    found = []
    session.search("timeout", execute_immediately=True, completion=found.append)
    assert wait_until(lambda: found)

    assert [e.safe_message for e in found[0]] == ["read timeout", "connect timeout"]
    assert session.displayed_logs == displayed
    assert session.criteria == criteria


def test_debounced_search_delivers_last_keyword(make_session):
    session = make_session(FakeLogManager(current=chronological(["info", "info", "info"])), interval=0.05)
    load(session)
    found = []
    for keyword in ["message", "message 0", "message 2"]:
        session.search(keyword, completion=found.append)
        QTest.qWait(5)

    assert wait_until(lambda: found)
    QTest.qWait(150)
    assert len(found) == 1
    assert [e.safe_message for e in found[0]] == ["message 2"]


def test_completion_runs_on_presentation_thread(make_session):
    session = make_session(FakeLogManager(current=chronological(["info"])))
    threads = []
    session.load(completion=lambda: threads.append(threading.current_thread()))
    session.search("x", True, completion=lambda _: threads.append(threading.current_thread()))
    session.refresh(True, completion=lambda: threads.append(threading.current_thread()))
    assert wait_until(lambda: len(threads) == 3)
    assert all(t is threading.main_thread() for t in threads)


def test_date_change_reloads_on_next_refresh(make_session):
    first = [LogEntry(at(DAY, 8), "info", "net", "first day")]
    second = [
        LogEntry(at(OTHER_DAY, 8), "error", "db", "second day early"),
        LogEntry(at(OTHER_DAY, 9), "warn", "db", "second day late"),
    ]
    manager = FakeLogManager(by_date={DAY: first, OTHER_DAY: second})
    session = make_session(manager)
    load(session, DAY)

    session.update_time_window(TimeWindow.for_date(OTHER_DAY))
    assert session.date_changed
    assert manager.date_requests == [DAY]

    refresh(session)

    assert manager.date_requests == [DAY, OTHER_DAY]
    assert not session.date_changed
    assert session.integral_logs == list(reversed(second))
    assert session.displayed_logs == list(reversed(second))
    assert [o.value for o in session.criteria.flag_options[1:]] == ["error", "warn"]


def test_same_date_does_not_reload(make_session):
    manager = FakeLogManager(by_date={DAY: [LogEntry(at(DAY, 8), "info", "net", "x")]})
    session = make_session(manager)
    load(session, DAY)

    session.update_time_window(TimeWindow(at(DAY, 7), at(DAY, 9), DAY))
    assert not session.date_changed
    refresh(session)

    assert manager.date_requests == [DAY]
    assert len(session.displayed_logs) == 1


def test_reverse_display_order_is_discarded_by_refresh(make_session):
    entries = chronological(["info", "info", "info"])
    session = make_session(FakeLogManager(current=entries))
    load(session)
    newest_first = session.displayed_logs

    session.reverse_display_order()
    assert session.displayed_logs == list(reversed(newest_first))
    assert session.integral_logs == newest_first

    refresh(session)
    assert session.displayed_logs == newest_first


def test_update_options_are_copied(make_session):
    session = make_session(FakeLogManager())
    options = [SelectedOption.all(False), SelectedOption("error", True)]
    session.update_flags(options)
    options[1].is_selected = False
    assert session.criteria.selected_flags() == {"error"}


def test_uses_registered_log_manager(qapp):
    manager = FakeLogManager()
    register_log_manager(manager)
    try:
        session = LogSession()
        assert session.displayed_logs == []
        session.close()
    finally:
        register_log_manager(None)


def test_requires_log_manager(qapp):
    with pytest.raises(ValueError):
        LogSession()


def test_window_chosen_while_loading_survives_load(make_session):
    first = [LogEntry(at(DAY, 8), "info", "net", "first day")]
    second = [LogEntry(at(OTHER_DAY, 8), "error", "db", "second day")]
    manager = BlockingLogManager(by_date={DAY: first, OTHER_DAY: second})
    session = make_session(manager)
    done = []
    try:
        session.load(DAY, completion=lambda: done.append(True))
        assert manager.entered.wait(3)
        session.update_time_window(TimeWindow.for_date(OTHER_DAY))
    finally:
        manager.release.set()
    assert wait_until(lambda: done)

    assert session.criteria.date == OTHER_DAY
    assert session.date_changed

    refresh(session)

    assert manager.date_requests == [DAY, OTHER_DAY]
    assert session.displayed_logs == second


def test_is_loading_while_worker_busy(make_session):
    manager = BlockingLogManager(by_date={DAY: [LogEntry(at(DAY, 8), "info", "net", "x")]})
    session = make_session(manager)
    assert not session.is_loading
    done = []
    try:
        session.load(DAY, completion=lambda: done.append(True))
        assert manager.entered.wait(3)
        assert session.is_loading
    finally:
        manager.release.set()
    assert wait_until(lambda: done)
    assert wait_until(lambda: not session.is_loading)


def test_error_occurred_when_job_raises(qapp):
    session = LogSession(
        log_manager=FakeLogManager(current=chronological(["info"])),
        engine=FailingEngine(),
    )
    errors = []
    completions = []
    session.error_occurred.connect(errors.append)
    try:
        session.refresh(execute_immediately=True, completion=lambda: completions.append(True))
        assert wait_until(lambda: errors)
        assert isinstance(errors[0], RuntimeError)
        assert completions == []
    finally:
        session.close()


def test_search_burst_does_not_cancel_pending_refresh(make_session):
    session = make_session(FakeLogManager(current=chronological(["info", "error"])), interval=0.05)
    load(session)
    refreshed = []
    found = []

    session.refresh(completion=lambda: refreshed.append(True))
    for keyword in ["m", "me", "message 0"]:
        session.search(keyword, completion=found.append)
        QTest.qWait(5)

    assert wait_until(lambda: refreshed and found)
    QTest.qWait(150)
    assert refreshed == [True]
    assert len(found) == 1
    assert [e.safe_message for e in found[0]] == ["message 0"]
