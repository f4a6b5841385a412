from dataclasses import dataclass
from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


@dataclass(frozen=True)
class WeekSettings:
    week_start_day: int = 4
    week_start_hour: int = 14
    week_end_day: int = 4
    week_end_hour: int = 14
    timezone: str | None = None

    def __post_init__(self):
        for name in ("week_start_day", "week_end_day"):
            if not 0 <= getattr(self, name) <= 6:
                raise ValueError(f"{name} must be within 0..6")
        for name in ("week_start_hour", "week_end_hour"):
            if not 0 <= getattr(self, name) <= 23:
                raise ValueError(f"{name} must be within 0..23")
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Unknown timezone: {self.timezone!r}") from None

    @property
    def is_exact_week(self) -> bool:
        return self.week_start_day == self.week_end_day and self.week_start_hour == self.week_end_hour

    @property
    def splits_boundary_day(self) -> bool:
        return self.week_start_day == self.week_end_day and self.week_start_hour > 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            week_start_day=int(data.get("weekStartDay", 4)),
            week_start_hour=int(data.get("weekStartHour", 14)),
            week_end_day=int(data.get("weekEndDay", 4)),
            week_end_hour=int(data.get("weekEndHour", 14)),
            timezone=data.get("timezone") or None,
        )

    def to_dict(self):
        data = {
            "weekStartDay": self.week_start_day,
            "weekStartHour": self.week_start_hour,
            "weekEndDay": self.week_end_day,
            "weekEndHour": self.week_end_hour,
        }
        if self.timezone:
            data["timezone"] = self.timezone
        return data


def weekday_of(value: date) -> int:
    # 0 = Sunday
    return (value.weekday() + 1) % 7


def localize(now: datetime, settings: WeekSettings) -> datetime:
    """Pin ``now`` to the settings timezone as a fixed UTC offset.

    The offset in force at ``now`` is used for the whole computation, so
    adding days never shifts the wall clock across a DST change.
    """
    if not settings.timezone or now.tzinfo is None:
        return now
    local = now.astimezone(ZoneInfo(settings.timezone))
    return local.replace(tzinfo=dt_timezone(local.utcoffset()))


def current_week_start(now: datetime, settings: WeekSettings) -> datetime:
    now = localize(now, settings)
    start = now.replace(hour=settings.week_start_hour, minute=0, second=0, microsecond=0)
    days_since_start = (weekday_of(now) - settings.week_start_day) % 7
    start -= timedelta(days=days_since_start)
    if now < start:
        start -= timedelta(days=7)
    return start


def current_week_end(now: datetime, settings: WeekSettings) -> datetime:
    start = current_week_start(now, settings)
    if settings.is_exact_week:
        return start + timedelta(days=7)

    end = start.replace(hour=settings.week_end_hour)
    days_to_end = (settings.week_end_day - settings.week_start_day) % 7
    end += timedelta(days=days_to_end or 7)
    if settings.week_end_day == settings.week_start_day and settings.week_end_hour <= settings.week_start_hour:
        end += timedelta(days=7)
    return end


def week_ending_on_or_after(value: date | datetime, week_end_day: int, boundary_hour: int | None = None) -> date:
    day = value.date() if isinstance(value, datetime) else value
    days_until_end = (week_end_day - weekday_of(day)) % 7
    if (
        days_until_end == 0
        and boundary_hour is not None
        and isinstance(value, datetime)
        and value.hour >= boundary_hour
    ):
        days_until_end = 7
    return day + timedelta(days=days_until_end)


def week_ending_on_or_before(value: date | datetime, week_end_day: int) -> date:
    day = value.date() if isinstance(value, datetime) else value
    days_since_end = (weekday_of(day) - week_end_day) % 7
    return day - timedelta(days=days_since_end)
