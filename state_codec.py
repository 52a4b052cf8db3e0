import logging
import math
from urllib.parse import urlencode, parse_qsl
import constants
from timeline_model import Event, Mode, TimelineState
from timeline_math import parse_int

logger = logging.getLogger(constants.LOGGER_NAME)


def encode(state):
    """Serializes a snapshot to a query string, events in their current order."""
    params = [
        (constants.PARAM_MODE, Mode.parse(state.mode).value),
        (constants.PARAM_DURATION, str(state.duration)),
    ]
    for evt in state.events:
        params.append((constants.PARAM_EVENT, f"{evt.timestamp}{constants.EVENT_SEPARATOR}{evt.text}"))
    return urlencode(params, safe='*')


def _decode_event(value):
    parts = value.split(constants.EVENT_SEPARATOR)
    if len(parts) > 2:
        logger.debug(f"[CODEC] Event text truncated at second separator: {value!r}")
    timestamp = parts[0]
    text = parts[1] if len(parts) > 1 else ""
    return Event(timestamp=timestamp, text=text)


def _sort_key(evt):
    # non-numeric timestamps go last, keeping their relative order
    value = parse_int(evt.timestamp)
    if isinstance(value, float) and math.isnan(value):
        return (1, 0)
    return (0, value)


def decode(query):
    """Parses a query string into a snapshot. Never raises.

    Missing or unknown fields fall back to defaults and events come back
    sorted by their numeric timestamp (stable for equal timestamps).
    """
    query = str(query or '')
    if query.startswith('?'):
        query = query[1:]
    duration = None
    mode = None
    events = []
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key == constants.PARAM_DURATION and duration is None:
            duration = value
        elif key == constants.PARAM_MODE and mode is None:
            mode = value
        elif key == constants.PARAM_EVENT:
            events.append(_decode_event(value))
    events = sorted(events, key=_sort_key)
    state = TimelineState(
        duration=duration if duration is not None else constants.DEFAULT_DURATION,
        events=events,
        mode=Mode.parse(mode),
    )
    logger.debug(f"[CODEC] Decoded {len(state.events)} events, mode={state.mode.value}, duration={state.duration!r}")
    return state


def query_from_url(url):
    """Returns the query part of a pasted link, or the input if it has none."""
    url = str(url or '').split('#', 1)[0]
    if '?' not in url:
        return url
    return url.split('?', 1)[1]
