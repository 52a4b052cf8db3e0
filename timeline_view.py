import logging
import math
from dataclasses import dataclass
from enum import Enum
import constants
from playback_clock import PlaybackClock
from timeline_model import Mode
from timeline_math import (parse_int, css_percent, format_time,
                           position_for_event_seconds, position_for_elapsed_ms)


class Axis(Enum):
    """Timeline orientation, valued by the CSS property the offset goes to."""
    HORIZONTAL = 'left'
    VERTICAL = 'top'


@dataclass(frozen=True)
class EventMarker:
    key: str
    text: str
    offset: str


@dataclass(frozen=True)
class Playhead:
    offset: str
    label: str


class TimelineViewModel:
    """Positions for one horizontal or vertical timeline and its own clock."""

    def __init__(self, state, axis=Axis.HORIZONTAL, scheduler=None, parent=None):
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.state = state
        self.axis = Axis(axis)
        self.clock = PlaybackClock(scheduler, parent)

    @property
    def css_property(self):
        return self.axis.value

    @property
    def total_seconds(self):
        return parse_int(self.state.duration)

    def update_state(self, state):
        self.state = state

    def markers(self):
        total = self.total_seconds
        return [
            EventMarker(
                key=f"{evt.timestamp}{evt.text}{i}",
                text=evt.text,
                offset=css_percent(position_for_event_seconds(evt.timestamp, total)),
            )
            for i, evt in enumerate(self.state.events)
        ]

    def playhead(self):
        offset = css_percent(position_for_elapsed_ms(self.clock.elapsed_ms, self.total_seconds))
        return Playhead(offset=offset, label=format_time(self.clock.elapsed_seconds))

    def events_between(self, start_ms, end_ms):
        """Events the playhead crosses moving from ``start_ms`` (exclusive) to ``end_ms``."""
        return [evt for evt in self.state.events
                if start_ms < parse_int(evt.timestamp) * 1000 <= end_ms]

    def passed_events(self):
        return self.events_between(-math.inf, self.clock.elapsed_ms)

    @property
    def finished(self):
        total = self.total_seconds
        if isinstance(total, float) and math.isnan(total):
            return False
        return self.clock.elapsed_ms >= total * 1000

    def close(self):
        """Unmount: no tick may fire after this."""
        self.clock.close()
        self.logger.debug(f"[VIEW] Closed {self.axis.name.lower()} timeline at {self.clock.elapsed_ms}ms.")


def view_for_mode(state, scheduler=None, parent=None):
    """The editor embeds a horizontal preview, so only vertical differs."""
    axis = Axis.VERTICAL if state.mode == Mode.vertical else Axis.HORIZONTAL
    return TimelineViewModel(state, axis, scheduler, parent)
