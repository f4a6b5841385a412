import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from .date_keys import DateKey
from .weeks import week_ending_on_or_after

PERIOD_DAILY = "daily"
PERIOD_WEEKLY = "weekly"
PERIOD_MONTHLY = "monthly"
PERIOD_CHOICES = [
    (PERIOD_DAILY, "Daily"),
    (PERIOD_WEEKLY, "Weekly"),
    (PERIOD_MONTHLY, "Monthly"),
]
PERIOD_TYPES = {value for value, _ in PERIOD_CHOICES}

MAX_COMPOSITE_LINES = 3


@dataclass(frozen=True)
class CompositeRow:
    date_key: DateKey
    line_values: tuple

    def to_dict(self):
        row = {"date": str(self.date_key)}
        for index, value in enumerate(self.line_values, start=1):
            if value is not None:
                row[f"line{index}Value"] = value
        return row


def merge_composite(series) -> list[CompositeRow]:
    """Row-align up to three ``[(DateKey, value), ...]`` series on their keys."""
    series = list(series)
    if len(series) > MAX_COMPOSITE_LINES:
        raise ValueError(f"A composite merges at most {MAX_COMPOSITE_LINES} series")

    by_key = {}
    for index, points in enumerate(series):
        for key, value in points:
            by_key.setdefault(key, [None] * len(series))[index] = value
    return [CompositeRow(key, tuple(by_key[key])) for key in sorted(by_key)]


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def shift_date(day: date, offset: int, period_type: str) -> date:
    if period_type == PERIOD_DAILY:
        return day + timedelta(days=offset)
    if period_type == PERIOD_WEEKLY:
        return day + timedelta(days=offset * 7)
    if period_type == PERIOD_MONTHLY:
        return _add_months(day, offset)
    raise ValueError(f"Unknown period type: {period_type!r}")


@dataclass(frozen=True)
class OverlayPoint:
    date: date
    value: float
    original_date: date

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "value": self.value,
            "originalDate": self.original_date.isoformat(),
        }


def shift_overlay(points, *, offset: int, period_type: str, start: date, end: date) -> list[OverlayPoint]:
    # Positive offsets move the overlay later on the chart.
    shifted = []
    for key, value in points:
        visible = shift_date(key.date, -offset, period_type)
        if start <= visible <= end:
            shifted.append(
                OverlayPoint(
                    date=visible,
                    value=value,
                    original_date=shift_date(visible, offset, period_type),
                )
            )
    return sorted(shifted, key=lambda point: point.date)


def _same_period(day: date, today: date, period_type: str, week_end_day: int) -> bool:
    if period_type == PERIOD_DAILY:
        return day == today
    if period_type == PERIOD_WEEKLY:
        return week_ending_on_or_after(day, week_end_day) == week_ending_on_or_after(today, week_end_day)
    return (day.year, day.month) == (today.year, today.month)


def split_current_period(points, *, today: date, period_type: str, week_end_day: int):
    """Separate the in-progress period from completed points.

    Returns ``(completed, current)``; ``current`` is the latest point when it
    belongs to today's period and carries a non-zero value, otherwise None.
    """
    ordered = sorted(points, key=lambda point: point[0])
    if not ordered:
        return [], None

    last_key, last_value = ordered[-1]
    if not _same_period(last_key.date, today, period_type, week_end_day):
        return ordered, None
    current = (last_key, last_value) if last_value else None
    return ordered[:-1], current


def merge_overlay(completed, current, overlay_points) -> list[dict]:
    rows = {}
    for key, value in completed:
        rows[str(key)] = {"date": str(key), "value": value}
    if current is not None:
        key, value = current
        rows[str(key)] = {"date": str(key), "currentValue": value}
    for point in overlay_points:
        key = point.date.isoformat()
        rows.setdefault(key, {"date": key})["overlayValue"] = point.value
    return [rows[key] for key in sorted(rows)]
