from datetime import date, timedelta

from .series import PERIOD_DAILY, PERIOD_MONTHLY, PERIOD_WEEKLY, shift_date

RANGE_CUSTOM = "custom"
RANGE_PRESETS = ["7d", "14d", "30d", "12w", "36w", "52w", "12m", "36m", RANGE_CUSTOM]
DEFAULT_RANGE_DAYS = 30

DEFAULT_LOOKBACK = {
    PERIOD_DAILY: 30,
    PERIOD_WEEKLY: 12,
    PERIOD_MONTHLY: 12,
}


def resolve_date_range(preset: str, today: date, *, custom_start: date | None = None, custom_end: date | None = None):
    """Return the inclusive ``(start, end)`` for a range preset.

    A custom range without both bounds, or an unrecognised preset, falls back
    to the last 30 days.
    """
    if preset == RANGE_CUSTOM and custom_start and custom_end:
        return custom_start, custom_end

    fallback = (today - timedelta(days=DEFAULT_RANGE_DAYS), today)
    if preset not in RANGE_PRESETS or preset == RANGE_CUSTOM:
        return fallback

    amount, unit = int(preset[:-1]), preset[-1]
    if unit == "d":
        return shift_date(today, -amount, PERIOD_DAILY), today
    if unit == "w":
        return shift_date(today, -amount, PERIOD_WEEKLY), today
    return shift_date(today, -amount, PERIOD_MONTHLY), today


def default_lookback_start(period_type: str, today: date) -> date:
    return shift_date(today, -DEFAULT_LOOKBACK[period_type], period_type)
