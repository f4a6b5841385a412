"""Addressing for daily entries on a split week-boundary day.

A boundary day that both ends one week and starts the next is stored as two
keys: the plain ISO date for the first half and the date plus
``SPLIT_HALF_SUFFIX`` for the second half. The suffix sorts after the bare
date and before the following day.
"""
from dataclasses import dataclass
from datetime import date

from .weeks import WeekSettings, weekday_of

SPLIT_HALF_SUFFIX = ".2"


def is_split_boundary_day(weekday: int, settings: WeekSettings) -> bool:
    return settings.splits_boundary_day and weekday == settings.week_start_day


def encode_date_key(day: date, is_second_half: bool = False) -> str:
    key = day.isoformat()
    if is_second_half:
        return key + SPLIT_HALF_SUFFIX
    return key


def decode_date_key(key: str) -> tuple[date, bool]:
    if not isinstance(key, str):
        raise ValueError(f"Invalid date key: {key!r}")
    raw = key.strip()
    is_second_half = raw.endswith(SPLIT_HALF_SUFFIX)
    if is_second_half:
        raw = raw[: -len(SPLIT_HALF_SUFFIX)]
    try:
        day = date.fromisoformat(raw)
    except ValueError:
        raise ValueError(f"Invalid date key: {key!r}") from None
    if len(raw) != 10:
        raise ValueError(f"Invalid date key: {key!r}")
    return day, is_second_half


@dataclass(frozen=True, order=True)
class DateKey:
    date: date
    is_second_half: bool = False

    @classmethod
    def parse(cls, key: str) -> "DateKey":
        day, is_second_half = decode_date_key(key)
        return cls(day, is_second_half)

    @property
    def base_date(self) -> str:
        return self.date.isoformat()

    def __str__(self) -> str:
        return encode_date_key(self.date, self.is_second_half)


def validate_date_key(key: DateKey, settings: WeekSettings) -> None:
    if key.is_second_half and not is_split_boundary_day(weekday_of(key.date), settings):
        raise ValueError(f"{key} is not a split boundary day")
