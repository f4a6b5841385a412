from dataclasses import dataclass
from datetime import date, timedelta

from .date_keys import DateKey
from .weeks import DAY_NAMES, WeekSettings

ORG_DAY = "Day"
ORG_FOUNDATION = "Foundation"
ORG_CHOICES = [
    (ORG_DAY, "Day"),
    (ORG_FOUNDATION, "Foundation"),
]

# Day schedule does not operate on these offsets from the boundary day
# (Sat and Sun for a Thursday boundary).
DEFAULT_DAY_SKIPPED_OFFSETS = (2, 3)


@dataclass(frozen=True)
class Slot:
    weekday: int
    label: str
    is_second_half: bool = False
    is_first_half: bool = False

    def to_dict(self):
        return {
            "dayOfWeek": self.weekday,
            "label": self.label,
            "isSecondHalf": self.is_second_half,
            "isFirstHalf": self.is_first_half,
        }


def build_slots(org: str, settings: WeekSettings, *, skipped_offsets=DEFAULT_DAY_SKIPPED_OFFSETS) -> list[Slot]:
    if org not in {ORG_DAY, ORG_FOUNDATION}:
        raise ValueError(f"Unknown organizational category: {org!r}")

    boundary_day = settings.week_start_day
    skipped = set(skipped_offsets) if org == ORG_DAY else set()
    slots = [Slot(boundary_day, f"{DAY_NAMES[boundary_day]} PM", is_second_half=True)]
    for offset in range(1, 7):
        if offset in skipped:
            continue
        weekday = (boundary_day + offset) % 7
        slots.append(Slot(weekday, DAY_NAMES[weekday]))
    slots.append(Slot(boundary_day, f"{DAY_NAMES[boundary_day]} AM", is_first_half=True))
    return slots


def slot_dates(week_ending_date: date, slots, settings: WeekSettings) -> list[DateKey]:
    start_date = week_ending_date - timedelta(days=7)
    keys = []
    for slot in slots:
        if slot.is_second_half:
            keys.append(DateKey(start_date, is_second_half=True))
        elif slot.is_first_half:
            keys.append(DateKey(week_ending_date))
        else:
            day_diff = (slot.weekday - settings.week_start_day) % 7
            keys.append(DateKey(start_date + timedelta(days=day_diff or 7)))
    return keys
