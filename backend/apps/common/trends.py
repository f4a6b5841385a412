from dataclasses import dataclass

TREND_UP = "up"
TREND_DOWN = "down"
TREND_FLAT = "flat"


@dataclass(frozen=True)
class TrendResult:
    trend: str | None = None
    down_streak: int = 0


def _is_worse(newer: float, older: float, *, is_inverted: bool) -> bool:
    if is_inverted:
        return newer > older
    return newer < older


def analyze_trend(values, *, is_inverted: bool = False) -> TrendResult:
    """Trend of the newest value against the previous one, plus the run of
    consecutive worsening steps counted back from the newest.

    ``values`` is ordered newest first.
    """
    values = list(values)
    if len(values) < 2:
        return TrendResult()

    newest, previous = values[0], values[1]
    if newest == previous:
        trend = TREND_FLAT
    elif _is_worse(newest, previous, is_inverted=is_inverted):
        trend = TREND_DOWN
    else:
        trend = TREND_UP

    down_streak = 0
    for newer, older in zip(values, values[1:]):
        if not _is_worse(newer, older, is_inverted=is_inverted):
            break
        down_streak += 1
    return TrendResult(trend=trend, down_streak=down_streak)
