"""Lenient coercion of half-filled form values. None of these functions raise.

Numbers parse like a browser's parseFloat: the leading numeric prefix is used,
anything else is zero. Dates parse from ISO strings, dates, or datetimes;
anything else is absent.
"""

import math
import re
from datetime import date, datetime, time, timezone
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal(0)
SECONDS_PER_DAY = Decimal(86400)

# Values beyond this magnitude are treated as garbage input
_MAX_ADJUSTED_EXPONENT = 18

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def _bounded(value: Decimal) -> Decimal:
    if not value.is_finite() or value.is_zero():
        return ZERO
    if abs(value.adjusted()) > _MAX_ADJUSTED_EXPONENT:
        return ZERO
    return value


def to_decimal(value) -> Decimal:
    """Coerce a form value to Decimal. Missing or unparsable values are zero."""
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return _bounded(value)

    if isinstance(value, int):
        return _bounded(Decimal(value))

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ZERO
        # shortest repr: 0.1 stays 0.1
        return _bounded(Decimal(str(value)))

    if isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if not match:
            return ZERO
        try:
            return _bounded(Decimal(match.group(1)))
        except InvalidOperation:
            return ZERO

    return ZERO


def _discarded_by_bound(value) -> bool:
    """True when a non-zero input was zeroed by the magnitude bound."""
    try:
        if isinstance(value, str):
            raw = Decimal(_NUMBER_PREFIX.match(value).group(1))
        elif isinstance(value, float):
            raw = Decimal(str(value))
        elif isinstance(value, (int, Decimal)):
            raw = Decimal(value)
        else:
            return False
    except (AttributeError, InvalidOperation):
        return False
    return not raw.is_zero()


def to_optional_int(value) -> int | None:
    """Coerce to int, keeping missing or unparsable values as None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not _NUMBER_PREFIX.match(value):
        return None
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    number = to_decimal(value)
    if number.is_zero() and _discarded_by_bound(value):
        return None
    return int(number)


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def parse_datetime(value) -> datetime | None:
    """Parse a date-like value into a naive datetime.

    Date-only values land at midnight. Aware datetimes are converted to UTC
    and made naive, so every comparison in the engine is naive-to-naive.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            # UTC shift lands outside year 1..9999
            return None
    return parsed


def parse_date(value) -> date | None:
    """Parse a date-like value and drop the time of day."""
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def resolve_now(now: datetime | date | None) -> datetime:
    """The evaluation clock: the caller's value, else local wall time."""
    parsed = parse_datetime(now)
    return parsed if parsed is not None else datetime.now()


def round_half_up_days(later: datetime, earlier: datetime) -> int:
    """Whole-day difference, halves rounded toward +infinity."""
    delta = later - earlier
    seconds = (
        Decimal(delta.days) * SECONDS_PER_DAY
        + delta.seconds
        + Decimal(delta.microseconds) / 1_000_000
    )
    days = seconds / SECONDS_PER_DAY
    return int((days + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def quantize(value: Decimal, places: int) -> Decimal:
    try:
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the context precision holds
        return value


def format_number(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros (200, 12.5)."""
    return format(value.normalize(), "f")
