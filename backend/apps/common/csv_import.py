import math
import re
from dataclasses import dataclass, field
from datetime import date

FIELD_SEPARATOR = re.compile(r"[,;\t]")
QUOTES = "\"'"

ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
DAY_FIRST_DATE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
DAY_FIRST_SHORT_DATE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$")
YEAR_FIRST_DATE = re.compile(r"^(\d{4})[/.](\d{1,2})[/.](\d{1,2})$")


@dataclass(frozen=True)
class ImportRow:
    date: date
    value: float


@dataclass
class ParseResult:
    rows: list = field(default_factory=list)
    skipped: int = 0


def _to_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_flexible_date(raw: str) -> date | None:
    raw = (raw or "").strip()

    match = ISO_DATE.match(raw)
    if match:
        year, month, day = match.groups()
        return _to_date(int(year), int(month), int(day))

    match = DAY_FIRST_DATE.match(raw)
    if match:
        day, month, year = match.groups()
        return _to_date(int(year), int(month), int(day))

    match = DAY_FIRST_SHORT_DATE.match(raw)
    if match:
        day, month, short_year = match.groups()
        century = 2000 if int(short_year) < 50 else 1900
        return _to_date(century + int(short_year), int(month), int(day))

    match = YEAR_FIRST_DATE.match(raw)
    if match:
        year, month, day = match.groups()
        return _to_date(int(year), int(month), int(day))

    return None


def _parse_value(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _split_fields(line: str) -> list[str]:
    return [part.strip().strip(QUOTES) for part in FIELD_SEPARATOR.split(line)]


def _is_header(line: str) -> bool:
    lowered = line.lower()
    if "date" in lowered or "value" in lowered:
        return True
    fields = _split_fields(line)
    return len(fields) < 2 or _parse_value(fields[1]) is None


def parse_import_text(text: str) -> ParseResult:
    """Parse ``date,value`` lines pasted or uploaded by a member.

    Blank lines are ignored. A leading header row is dropped without being
    counted; every other unusable line adds one to ``skipped``.
    """
    result = ParseResult()
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if not lines:
        return result
    if _is_header(lines[0]):
        lines = lines[1:]

    for line in lines:
        fields = _split_fields(line)
        if len(fields) < 2:
            result.skipped += 1
            continue
        value = _parse_value(fields[1])
        day = parse_flexible_date(fields[0])
        if value is None or day is None:
            result.skipped += 1
            continue
        result.rows.append(ImportRow(date=day, value=value))
    return result
