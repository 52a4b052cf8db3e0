import os
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5.QtCore import QCoreApplication
from playback_clock import TickScheduler

# Ensure a QCoreApplication exists (singleton)
if not QCoreApplication.instance():
    app = QCoreApplication([])


class ManualTickScheduler(TickScheduler):
    """Fires ticks only when the test asks for them."""

    def __init__(self):
        self.pending = {}
        self.intervals = []
        self.cancelled = []
        self._next_handle = 0

    def start(self, interval_ms, callback):
        self._next_handle += 1
        self.pending[self._next_handle] = callback
        self.intervals.append(interval_ms)
        return self._next_handle

    def cancel(self, handle):
        self.pending.pop(handle, None)
        self.cancelled.append(handle)

    def fire(self, times=1):
        for _ in range(times):
            for callback in list(self.pending.values()):
                callback()


@pytest.fixture
def scheduler():
    return ManualTickScheduler()
