from datetime import date

MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

DATE_FORMAT_SHORT = "dd-MMM-yy"
DATE_FORMAT_LONG = "MMM dd, yyyy"
DATE_FORMAT_NUMERIC = "dd/MM/yy"
DATE_FORMAT_ISO = "yyyy-MM-dd"
DATE_FORMAT_CHOICES = [
    (DATE_FORMAT_SHORT, "13-Jun-25"),
    (DATE_FORMAT_LONG, "Jun 13, 2025"),
    (DATE_FORMAT_NUMERIC, "13/06/25"),
    (DATE_FORMAT_ISO, "2025-06-13"),
]


def format_number(value) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_stat_value(value, *, is_money: bool = False, is_percentage: bool = False) -> str:
    if value is None:
        return ""
    text = format_number(value)
    if is_money:
        text = f"${text}"
    if is_percentage:
        text = f"{text}%"
    return text


def format_boundary_hour(hour: int) -> str:
    if hour == 0:
        return "12am"
    if hour < 12:
        return f"{hour}am"
    if hour == 12:
        return "12pm"
    return f"{hour - 12}pm"


def format_date(value: date, date_format: str = DATE_FORMAT_SHORT) -> str:
    month = MONTH_ABBREVIATIONS[value.month - 1]
    if date_format == DATE_FORMAT_LONG:
        return f"{month} {value.day}, {value.year}"
    if date_format == DATE_FORMAT_NUMERIC:
        return f"{value.day:02d}/{value.month:02d}/{value.year % 100:02d}"
    if date_format == DATE_FORMAT_ISO:
        return value.isoformat()
    return f"{value.day}-{month}-{value.year % 100:02d}"


def week_ending_title(week_ending: date, date_format: str = DATE_FORMAT_SHORT) -> str:
    return f"W/E {format_date(week_ending, date_format)}"
