"""Duration arithmetic and formatting."""
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal


def minutes_between(start: datetime, end: datetime) -> int:
    """
    Whole minutes elapsed between two datetimes.

    Truncates toward negative infinity, so partial minutes never count.

    Examples:
        >>> minutes_between(datetime(2025, 1, 1, 8, 0), datetime(2025, 1, 1, 8, 59, 59))
        59
    """
    delta = end - start
    return int(delta.total_seconds() // 60)


def parse_clock_time(value: str) -> time:
    """Parse an ``HH:MM`` string into a time of day."""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def minutes_of_day(value: str) -> int:
    """
    Minutes since midnight for an ``HH:MM`` string.

    Examples:
        >>> minutes_of_day("08:30")
        510
    """
    parsed = parse_clock_time(value)
    return parsed.hour * 60 + parsed.minute


def clock_span_minutes(start_time: str, end_time: str) -> int:
    """Minutes between two ``HH:MM`` times on the same day."""
    return minutes_of_day(end_time) - minutes_of_day(start_time)


def combine(study_date: date, clock_time: str) -> datetime:
    """Build the datetime for an ``HH:MM`` time on a given date."""
    return datetime.combine(study_date, parse_clock_time(clock_time))


def format_minutes(minutes: float) -> str:
    """
    Format a minute count as ``HH:MM``.

    Fractional minutes are dropped before splitting into hours and minutes.

    Examples:
        >>> format_minutes(125)
        '02:05'
        >>> format_minutes(59.9)
        '00:59'
    """
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to ``places`` decimals with halves going away from zero.

    Examples:
        >>> round_half_up(5.625)
        5.63
        >>> round_half_up(25.714285)
        25.71
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
