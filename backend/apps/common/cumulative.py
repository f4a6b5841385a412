from dataclasses import dataclass


@dataclass(frozen=True)
class CumulativePoint:
    slot_index: int
    label: str
    date_key: str
    daily_value: float | None
    cumulative: float | None
    quota: float | None
    daily: float | None
    prev_cumulative: float | None

    def to_dict(self):
        return {
            "slotIndex": self.slot_index,
            "label": self.label,
            "dateKey": self.date_key,
            "dailyValue": self.daily_value,
            "cumulative": self.cumulative,
            "quota": self.quota,
            "daily": self.daily,
            "prevCumulative": self.prev_cumulative,
        }


def project_cumulative(
    *,
    slots,
    slot_keys,
    values,
    quotas=(),
    prev_slot_keys=None,
    show_prev_week: bool = False,
    show_daily_values: bool = False,
) -> list[CumulativePoint]:
    """Running totals per slot for the weekly cumulative report.

    ``values`` maps encoded date keys to daily values; keys absent from it are
    unset slots, which add nothing to the running total.
    """
    if len(slot_keys) != len(slots):
        raise ValueError("slot_keys must line up with slots")
    show_prev_week = show_prev_week and prev_slot_keys is not None
    show_quota = any(quotas)

    cumulative = 0
    prev_cumulative = 0
    cumulative_quota = 0
    points = []
    for index, slot in enumerate(slots):
        key = str(slot_keys[index])
        daily_value = values.get(key)
        cumulative_quota += quotas[index] if index < len(quotas) else 0
        if daily_value is not None:
            cumulative += daily_value

        prev_value = None
        if show_prev_week:
            prev_daily = values.get(str(prev_slot_keys[index]))
            if prev_daily is not None:
                prev_cumulative += prev_daily
            if prev_cumulative > 0 or prev_daily is not None:
                prev_value = prev_cumulative

        points.append(
            CumulativePoint(
                slot_index=index,
                label=slot.label,
                date_key=key,
                daily_value=daily_value,
                cumulative=cumulative if daily_value is not None else None,
                quota=cumulative_quota if show_quota else None,
                daily=daily_value if show_daily_values else None,
                prev_cumulative=prev_value,
            )
        )
    return points
