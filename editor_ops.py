import logging
import constants
from timeline_model import Event, Mode
from timeline_math import parse_int, format_number, format_time

logger = logging.getLogger(constants.LOGGER_NAME)


def add_row(state):
    """Appends an empty event one second after the last one."""
    events = state.events
    if not events:
        timestamp = '1'
    else:
        timestamp = format_number(parse_int(events[-1].timestamp) + 1)
    logger.debug(f"[EDITOR] Adding row at {timestamp}")
    return state.with_changes(events=events + (Event(timestamp, ''),))


def update_row(state, old_timestamp, new_event):
    """Replaces every event at ``old_timestamp``; ``None`` removes them."""
    updated = []
    for evt in state.events:
        if evt.timestamp != old_timestamp:
            updated.append(evt)
        elif new_event is not None:
            updated.append(new_event)
    return state.with_changes(events=updated)


def remove_row(state, old_timestamp):
    return update_row(state, old_timestamp, None)


def set_duration(state, duration):
    return state.with_changes(duration=duration)


def set_mode(state, mode):
    return state.with_changes(mode=Mode.parse(mode))


def event_listing(state):
    return [f"{format_time(evt.timestamp)}:{evt.text}" for evt in state.events]
