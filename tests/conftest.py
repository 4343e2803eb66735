"""Shared fixtures for the test suite"""

import os
import time
from collections.abc import Callable

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtTest import QTest  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    """The QApplication needed by timers, threads and widgets."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app  # pyright: ignore[reportReturnType]


@pytest.fixture
def wait_until(qapp: QApplication) -> Callable[..., bool]:
    """Process Qt events until a condition holds or the timeout expires."""

    def _wait(condition: Callable[[], bool], timeout_ms: int = 3000) -> bool:
        deadline = time.monotonic() + timeout_ms / 1000
        while time.monotonic() < deadline:
            if condition():
                return True
            QTest.qWait(10)
        return condition()

    return _wait
