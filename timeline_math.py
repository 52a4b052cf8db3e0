"""Number handling shared by the codec, the clock and the timeline views.

Timestamps and durations travel as strings and are parsed the way a browser's
``parseInt`` does, so a bad value turns into NaN instead of an exception and
the views simply end up with an unpositioned marker. Every parsed value is a
double, as in the browser: digit runs too long for one become ``Infinity``.
"""
import math
import re

NAN = float('nan')
_INT_PREFIX = re.compile(r'\s*([+-]?)(0[xX][0-9a-fA-F]+|\d+)')
# past this many digits a decimal run is beyond the double range
_MAX_DIGITS = 309


def _as_double(number):
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


def parse_int(value):
    """Leading-integer parse; returns ``NAN`` when no digits lead the string."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            return NAN
        return _as_double(int(value))
    if value is None:
        return NAN
    m = _INT_PREFIX.match(str(value))
    if not m:
        return NAN
    sign, digits = m.groups()
    if digits[:2].lower() == '0x':
        number = int(digits, 16)
    else:
        digits = digits.lstrip('0') or '0'
        number = math.inf if len(digits) > _MAX_DIGITS else int(digits)
    return _as_double(-number if sign == '-' else number)


def to_number(value):
    """Numbers pass through as doubles, everything else goes through ``parse_int``."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _as_double(value)
    return parse_int(value)


def divide(a, b):
    if b == 0:
        if a == 0 or math.isnan(a):
            return NAN
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def format_number(value):
    """Render like a JS number: ``25`` not ``25.0``, ``NaN``, ``Infinity``, ``1e-7``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(abs(value))
    sign = '-' if value < 0 else ''
    if 'e' not in text:
        return sign + text
    mantissa, exponent = text.split('e')
    exponent = int(exponent)
    if -6 <= exponent < 0:
        # 1e-6 <= |value| < 1e-4 stays positional
        return f"{sign}0.{'0' * (-exponent - 1)}{mantissa.replace('.', '')}"
    return f"{sign}{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def css_percent(value):
    return f"{format_number(value)}%"


def position_for_event_seconds(timestamp_seconds, total_duration_seconds):
    t = to_number(timestamp_seconds)
    total = to_number(total_duration_seconds)
    return divide(t, total) * 100


def position_for_elapsed_ms(elapsed_ms, total_duration_seconds):
    t = divide(to_number(elapsed_ms), 1000)
    total = to_number(total_duration_seconds)
    return divide(t, total) * 100


def format_time(seconds):
    """``m:ss`` with unbounded minutes; NaN input gives ``NaN:NaN``."""
    time = parse_int(seconds) if isinstance(seconds, str) else to_number(seconds)
    if not math.isfinite(time):
        minutes = time if math.isinf(time) else NAN
        secs = NAN
    else:
        minutes = float(math.floor(time / 60))
        secs = math.fmod(time, 60)
    return f"{format_number(minutes)}:{format_number(secs).rjust(2, '0')}"
