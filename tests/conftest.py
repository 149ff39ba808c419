"""pytest configuration and fixtures for logscope tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QCoreApplication
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


def wait_until(predicate, timeout_ms=3000, step_ms=10):
    """Pump the Qt event loop until predicate() is true or the timeout expires."""
    waited = 0
    while not predicate():
        if waited >= timeout_ms:
            return False
        QTest.qWait(step_ms)
        waited += step_ms
    QCoreApplication.processEvents()
    return True
