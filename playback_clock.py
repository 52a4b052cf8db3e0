import logging
from dataclasses import dataclass
from PyQt5.QtCore import QObject, QTimer, pyqtSignal
import constants


@dataclass(frozen=True)
class PlaybackState:
    playing: bool = False
    elapsed_ms: int = 0


class TickScheduler:
    """Delivers a repeating callback from the host event loop.

    ``start`` returns a handle that ``cancel`` accepts. After ``cancel`` the
    callback must not fire again.
    """

    def start(self, interval_ms, callback):
        raise NotImplementedError

    def cancel(self, handle):
        raise NotImplementedError


class QtTickScheduler(TickScheduler):

    def __init__(self, parent=None):
        self.parent = parent

    def start(self, interval_ms, callback):
        timer = QTimer(self.parent)
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        return timer

    def cancel(self, handle):
        handle.stop()
        handle.deleteLater()


class PlaybackClock(QObject):
    elapsed_changed = pyqtSignal(int)
    state_changed = pyqtSignal(bool)

    def __init__(self, scheduler=None, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.scheduler = scheduler if scheduler is not None else QtTickScheduler(self)
        self._playing = False
        self._elapsed_ms = 0
        self._tick_handle = None
        self._closed = False

    @property
    def is_playing(self):
        return self._playing

    @property
    def elapsed_ms(self):
        return self._elapsed_ms

    @property
    def elapsed_seconds(self):
        return self._elapsed_ms // 1000

    @property
    def closed(self):
        return self._closed

    def snapshot(self):
        return PlaybackState(playing=self._playing, elapsed_ms=self._elapsed_ms)

    def play(self):
        if self._closed:
            self.logger.warning("[PLAYBACK] play() ignored on a closed clock.")
            return
        if self._playing:
            return
        self._tick_handle = self.scheduler.start(constants.TICK_MS, self._on_tick)
        self._playing = True
        self.logger.debug(f"[PLAYBACK] Playing from {self._elapsed_ms}ms.")
        self.state_changed.emit(True)

    def pause(self):
        if not self._playing:
            return
        self._cancel_tick()
        self._playing = False
        self.logger.debug(f"[PLAYBACK] Paused at {self._elapsed_ms}ms.")
        self.state_changed.emit(False)

    def toggle(self):
        if self._playing:
            self.pause()
        else:
            self.play()

    def reset(self):
        """Rewinds to zero and leaves the clock paused, whatever its state."""
        self.pause()
        if self._elapsed_ms != 0:
            self._elapsed_ms = 0
            self.elapsed_changed.emit(0)
        self.logger.debug("[PLAYBACK] Reset.")

    def close(self):
        """Cancels the pending tick; the clock stays stopped afterwards."""
        if self._closed:
            return
        self.pause()
        self._closed = True
        self.logger.debug("[PLAYBACK] Clock closed.")

    def _on_tick(self):
        # a tick already queued by the host when we cancelled
        if not self._playing:
            return
        self._elapsed_ms += constants.TICK_MS
        self.elapsed_changed.emit(self._elapsed_ms)

    def _cancel_tick(self):
        if self._tick_handle is not None:
            self.scheduler.cancel(self._tick_handle)
            self._tick_handle = None
