from dataclasses import dataclass, field, replace, asdict
from enum import Enum
import constants
from timeline_math import format_number


class Mode(str, Enum):
    editor = 'editor'
    horizontal = 'horizontal'
    vertical = 'vertical'

    @classmethod
    def parse(cls, value):
        """Unknown or missing names fall back to the editor view."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.editor


@dataclass(frozen=True)
class Event:
    timestamp: str
    text: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(timestamp=str(data.get('timestamp', '')), text=str(data.get('text', '')))

    def to_dict(self):
        return asdict(self)


def _duration_text(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


@dataclass(frozen=True)
class TimelineState:
    duration: str = constants.DEFAULT_DURATION
    events: tuple = field(default_factory=tuple)
    mode: Mode = Mode.editor

    def __post_init__(self):
        if not isinstance(self.duration, str):
            object.__setattr__(self, 'duration', _duration_text(self.duration))
        object.__setattr__(self, 'events', tuple(self.events))
        object.__setattr__(self, 'mode', Mode.parse(self.mode))

    def with_changes(self, **changes):
        """Copy-and-override builder; snapshots are never edited in place."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data):
        events = [Event.from_dict(e) for e in data.get('events', [])]
        return cls(
            duration=str(data.get('duration', constants.DEFAULT_DURATION)),
            events=events,
            mode=Mode.parse(data.get('mode')),
        )

    def to_dict(self):
        return {
            'duration': self.duration,
            'events': [e.to_dict() for e in self.events],
            'mode': self.mode.value,
        }
