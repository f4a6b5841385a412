from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from .csv_import import parse_flexible_date, parse_import_text
from .cumulative import project_cumulative
from .date_keys import DateKey, decode_date_key, encode_date_key, is_split_boundary_day, validate_date_key
from .formatting import (
    DATE_FORMAT_ISO,
    DATE_FORMAT_LONG,
    DATE_FORMAT_NUMERIC,
    format_boundary_hour,
    format_date,
    format_stat_value,
    week_ending_title,
)
from .ranges import default_lookback_start, resolve_date_range
from .series import merge_composite, merge_overlay, shift_date, shift_overlay, split_current_period
from .slots import ORG_DAY, ORG_FOUNDATION, build_slots, slot_dates
from .trends import TREND_DOWN, TREND_FLAT, TREND_UP, analyze_trend
from .weeks import (
    WeekSettings,
    current_week_end,
    current_week_start,
    week_ending_on_or_after,
    week_ending_on_or_before,
)

DEFAULT_SETTINGS = WeekSettings()


class WeekBoundaryTests(SimpleTestCase):
    def test_week_start_after_boundary_hour(self):
        now = datetime(2025, 6, 12, 15, 0)
        self.assertEqual(current_week_start(now, DEFAULT_SETTINGS), datetime(2025, 6, 12, 14, 0))
        self.assertEqual(current_week_end(now, DEFAULT_SETTINGS), datetime(2025, 6, 19, 14, 0))

    def test_week_start_before_boundary_hour_rolls_back(self):
        now = datetime(2025, 6, 12, 10, 0)
        self.assertEqual(current_week_start(now, DEFAULT_SETTINGS), datetime(2025, 6, 5, 14, 0))

    def test_exact_week_is_always_seven_days(self):
        base = datetime(2025, 6, 1, 0, 30)
        for hours in range(0, 21 * 24, 5):
            now = base + timedelta(hours=hours)
            start = current_week_start(now, DEFAULT_SETTINGS)
            end = current_week_end(now, DEFAULT_SETTINGS)
            self.assertEqual(end - start, timedelta(days=7))
            self.assertTrue(start <= now < end)

    def test_distinct_start_and_end_days(self):
        settings = WeekSettings(week_start_day=1, week_start_hour=9, week_end_day=5, week_end_hour=17)
        now = datetime(2025, 6, 11, 12, 0)
        self.assertEqual(current_week_start(now, settings), datetime(2025, 6, 9, 9, 0))
        self.assertEqual(current_week_end(now, settings), datetime(2025, 6, 13, 17, 0))

    def test_same_day_end_before_start_hour_lands_next_week(self):
        settings = WeekSettings(week_start_day=4, week_start_hour=14, week_end_day=4, week_end_hour=10)
        now = datetime(2025, 6, 12, 15, 0)
        self.assertEqual(current_week_end(now, settings), datetime(2025, 6, 26, 10, 0))

    def test_same_day_end_after_start_hour_lands_next_week(self):
        settings = WeekSettings(week_start_day=4, week_start_hour=10, week_end_day=4, week_end_hour=14)
        now = datetime(2025, 6, 12, 11, 0)
        self.assertEqual(current_week_start(now, settings), datetime(2025, 6, 12, 10, 0))
        self.assertEqual(current_week_end(now, settings), datetime(2025, 6, 19, 14, 0))

    def test_unknown_timezone_is_rejected(self):
        for name in ["Mars/Olympus", "../etc/passwd"]:
            with self.assertRaises(ValueError):
                WeekSettings(timezone=name)

    def test_timezone_is_applied_before_arithmetic(self):
        settings = WeekSettings(timezone="Asia/Tokyo")
        tokyo = ZoneInfo("Asia/Tokyo")
        before = datetime(2025, 6, 12, 4, 0, tzinfo=dt_timezone.utc)
        after = datetime(2025, 6, 12, 6, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(current_week_start(before, settings), datetime(2025, 6, 5, 14, 0, tzinfo=tokyo))
        self.assertEqual(current_week_start(after, settings), datetime(2025, 6, 12, 14, 0, tzinfo=tokyo))

    def test_week_ending_on_or_after(self):
        self.assertEqual(week_ending_on_or_after(date(2025, 6, 10), 4), date(2025, 6, 12))
        self.assertEqual(week_ending_on_or_after(date(2025, 6, 12), 4), date(2025, 6, 12))
        self.assertEqual(week_ending_on_or_after(datetime(2025, 6, 12, 13, 0), 4, 14), date(2025, 6, 12))
        self.assertEqual(week_ending_on_or_after(datetime(2025, 6, 12, 14, 0), 4, 14), date(2025, 6, 19))

    def test_week_ending_on_or_before(self):
        self.assertEqual(week_ending_on_or_before(date(2025, 6, 10), 4), date(2025, 6, 5))
        self.assertEqual(week_ending_on_or_before(date(2025, 6, 12), 4), date(2025, 6, 12))

    def test_out_of_range_settings_raise(self):
        with self.assertRaises(ValueError):
            WeekSettings(week_start_day=7)
        with self.assertRaises(ValueError):
            WeekSettings(week_end_hour=24)

    def test_settings_dict_round_trip(self):
        settings = WeekSettings(week_start_day=1, week_start_hour=0, week_end_day=1, week_end_hour=0)
        self.assertEqual(WeekSettings.from_dict(settings.to_dict()), settings)


class DateKeyTests(SimpleTestCase):
    def test_second_half_suffix(self):
        self.assertEqual(encode_date_key(date(2025, 6, 12), True), "2025-06-12.2")
        self.assertEqual(decode_date_key("2025-06-12.2"), (date(2025, 6, 12), True))
        self.assertEqual(decode_date_key("2025-06-12"), (date(2025, 6, 12), False))

    def test_keys_keep_lexical_order(self):
        day = date(2025, 6, 12)
        first = encode_date_key(day)
        second = encode_date_key(day, True)
        following = encode_date_key(day + timedelta(days=1))
        self.assertLess(first, second)
        self.assertLess(second, following)
        self.assertLess(DateKey(day), DateKey(day, True))
        self.assertLess(DateKey(day, True), DateKey(day + timedelta(days=1)))

    def test_round_trip_across_a_year(self):
        day = date(2024, 1, 1)
        for offset in range(366):
            for half in (False, True):
                key = DateKey(day + timedelta(days=offset), half)
                self.assertEqual(DateKey.parse(str(key)), key)

    def test_malformed_keys_raise(self):
        for key in ["", "bad", "2025-6-1", "20250612", "2025-13-01", None, 20250612, date(2025, 6, 12)]:
            with self.assertRaises(ValueError):
                decode_date_key(key)

    def test_split_boundary_day(self):
        self.assertTrue(is_split_boundary_day(4, DEFAULT_SETTINGS))
        self.assertFalse(is_split_boundary_day(5, DEFAULT_SETTINGS))
        midnight = WeekSettings(week_start_hour=0, week_end_hour=0)
        self.assertFalse(is_split_boundary_day(4, midnight))

    def test_second_half_rejected_off_boundary_day(self):
        validate_date_key(DateKey(date(2025, 6, 12), True), DEFAULT_SETTINGS)
        with self.assertRaises(ValueError):
            validate_date_key(DateKey(date(2025, 6, 10), True), DEFAULT_SETTINGS)


class SlotSchemeTests(SimpleTestCase):
    def test_foundation_has_eight_slots(self):
        slots = build_slots(ORG_FOUNDATION, DEFAULT_SETTINGS)
        self.assertEqual(
            [slot.label for slot in slots],
            ["Thu PM", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed", "Thu AM"],
        )
        self.assertTrue(slots[0].is_second_half)
        self.assertTrue(slots[-1].is_first_half)

    def test_day_skips_weekend(self):
        slots = build_slots(ORG_DAY, DEFAULT_SETTINGS)
        self.assertEqual(len(slots), 6)
        self.assertEqual([slot.label for slot in slots], ["Thu PM", "Fri", "Mon", "Tue", "Wed", "Thu AM"])
        self.assertTrue(slots[0].is_second_half)
        self.assertTrue(slots[-1].is_first_half)

    def test_slot_dates(self):
        slots = build_slots(ORG_DAY, DEFAULT_SETTINGS)
        keys = slot_dates(date(2025, 6, 12), slots, DEFAULT_SETTINGS)
        self.assertEqual(
            [str(key) for key in keys],
            ["2025-06-05.2", "2025-06-06", "2025-06-09", "2025-06-10", "2025-06-11", "2025-06-12"],
        )

    def test_unknown_org_raises(self):
        with self.assertRaises(ValueError):
            build_slots("Night", DEFAULT_SETTINGS)


class TrendTests(SimpleTestCase):
    def test_trend_direction(self):
        self.assertEqual(analyze_trend([10, 7]).trend, TREND_UP)
        self.assertEqual(analyze_trend([10, 7], is_inverted=True).trend, TREND_DOWN)
        self.assertEqual(analyze_trend([5, 5]).trend, TREND_FLAT)

    def test_too_few_values(self):
        result = analyze_trend([5])
        self.assertIsNone(result.trend)
        self.assertEqual(result.down_streak, 0)

    def test_down_streak_stops_at_first_break(self):
        self.assertEqual(analyze_trend([1, 2, 3, 4]).down_streak, 3)
        self.assertEqual(analyze_trend([1, 2, 0, 4]).down_streak, 1)
        self.assertEqual(analyze_trend([4, 3, 2, 5], is_inverted=True).down_streak, 2)
        self.assertEqual(analyze_trend([10, 7]).down_streak, 0)


class CompositeMergeTests(SimpleTestCase):
    def test_rows_keep_missing_lines_absent(self):
        rows = merge_composite(
            [
                [(DateKey(date(2025, 1, 1)), 10.0)],
                [(DateKey(date(2025, 1, 2)), 20.0)],
            ]
        )
        self.assertEqual(
            [row.to_dict() for row in rows],
            [
                {"date": "2025-01-01", "line1Value": 10.0},
                {"date": "2025-01-02", "line2Value": 20.0},
            ],
        )

    def test_more_than_three_series_raise(self):
        with self.assertRaises(ValueError):
            merge_composite([[], [], [], []])


class OverlayTests(SimpleTestCase):
    def test_shift_inverse(self):
        start = date(2024, 1, 1)
        for offset in range(0, 400, 7):
            day = start + timedelta(days=offset)
            for period_type in ("daily", "weekly"):
                for k in (-5, 1, 3):
                    self.assertEqual(shift_date(shift_date(day, k, period_type), -k, period_type), day)
        for month in range(1, 13):
            day = date(2025, month, 1)
            self.assertEqual(shift_date(shift_date(day, 14, "monthly"), -14, "monthly"), day)

    def test_month_shift_clamps_to_month_end(self):
        self.assertEqual(shift_date(date(2025, 1, 31), 1, "monthly"), date(2025, 2, 28))
        self.assertEqual(shift_date(date(2024, 3, 31), -1, "monthly"), date(2024, 2, 29))

    def test_shift_overlay_filters_and_sorts(self):
        points = [
            (DateKey(date(2025, 6, 8)), 5.0),
            (DateKey(date(2025, 6, 1)), 3.0),
            (DateKey(date(2025, 5, 1)), 1.0),
        ]
        shifted = shift_overlay(
            points,
            offset=7,
            period_type="daily",
            start=date(2025, 5, 20),
            end=date(2025, 6, 5),
        )
        self.assertEqual(
            [point.to_dict() for point in shifted],
            [
                {"date": "2025-05-25", "value": 3.0, "originalDate": "2025-06-01"},
                {"date": "2025-06-01", "value": 5.0, "originalDate": "2025-06-08"},
            ],
        )

    def test_split_current_period_daily(self):
        points = [(DateKey(date(2025, 6, 10)), 5.0), (DateKey(date(2025, 6, 12)), 3.0)]
        completed, current = split_current_period(points, today=date(2025, 6, 12), period_type="daily", week_end_day=4)
        self.assertEqual(completed, [points[0]])
        self.assertEqual(current, points[1])

        completed, current = split_current_period(points, today=date(2025, 6, 13), period_type="daily", week_end_day=4)
        self.assertEqual(completed, points)
        self.assertIsNone(current)

    def test_zero_current_period_is_dropped(self):
        points = [(DateKey(date(2025, 6, 10)), 5.0), (DateKey(date(2025, 6, 12)), 0.0)]
        completed, current = split_current_period(points, today=date(2025, 6, 12), period_type="daily", week_end_day=4)
        self.assertEqual(completed, [points[0]])
        self.assertIsNone(current)

    def test_split_current_period_weekly_and_monthly(self):
        weekly = [(DateKey(date(2025, 6, 5)), 8.0), (DateKey(date(2025, 6, 12)), 4.0)]
        _, current = split_current_period(weekly, today=date(2025, 6, 11), period_type="weekly", week_end_day=4)
        self.assertEqual(current, weekly[1])

        monthly = [(DateKey(date(2025, 5, 1)), 8.0), (DateKey(date(2025, 6, 1)), 4.0)]
        completed, current = split_current_period(monthly, today=date(2025, 6, 20), period_type="monthly", week_end_day=4)
        self.assertEqual(completed, [monthly[0]])
        self.assertEqual(current, monthly[1])

    def test_merge_overlay(self):
        overlay = shift_overlay(
            [(DateKey(date(2025, 6, 9)), 7.0)],
            offset=1,
            period_type="daily",
            start=date(2025, 6, 1),
            end=date(2025, 6, 30),
        )
        rows = merge_overlay(
            [(DateKey(date(2025, 6, 8)), 2.0)],
            (DateKey(date(2025, 6, 12)), 3.0),
            overlay,
        )
        self.assertEqual(
            rows,
            [
                {"date": "2025-06-08", "value": 2.0, "overlayValue": 7.0},
                {"date": "2025-06-12", "currentValue": 3.0},
            ],
        )


class CumulativeProjectionTests(SimpleTestCase):
    def setUp(self):
        self.slots = build_slots(ORG_DAY, DEFAULT_SETTINGS)
        self.keys = slot_dates(date(2025, 6, 12), self.slots, DEFAULT_SETTINGS)
        self.prev_keys = slot_dates(date(2025, 6, 5), self.slots, DEFAULT_SETTINGS)
        self.values = {
            "2025-06-05.2": 5,
            "2025-06-06": 3,
            "2025-06-09": 4,
            "2025-06-10": 2,
            "2025-06-11": 6,
            "2025-06-12": 1,
        }

    def test_weekly_report_sequence(self):
        points = project_cumulative(slots=self.slots, slot_keys=self.keys, values=self.values, quotas=[2] * 6)
        self.assertEqual([point.cumulative for point in points], [5, 8, 12, 14, 20, 21])
        self.assertEqual([point.quota for point in points], [2, 4, 6, 8, 10, 12])
        self.assertEqual([point.daily for point in points], [None] * 6)

    def test_quota_curve_is_prefix_sum(self):
        quotas = [1, 0, 3, 0, 5, 2]
        points = project_cumulative(slots=self.slots, slot_keys=self.keys, values={}, quotas=quotas)
        self.assertEqual([point.quota for point in points], [1, 1, 4, 4, 9, 11])
        self.assertEqual([point.cumulative for point in points], [None] * 6)

    def test_all_zero_quota_is_hidden(self):
        points = project_cumulative(slots=self.slots, slot_keys=self.keys, values=self.values, quotas=[0] * 6)
        self.assertEqual([point.quota for point in points], [None] * 6)

    def test_missing_value_keeps_running_total(self):
        values = dict(self.values)
        del values["2025-06-09"]
        points = project_cumulative(slots=self.slots, slot_keys=self.keys, values=values, show_daily_values=True)
        self.assertEqual([point.cumulative for point in points], [5, 8, None, 10, 16, 17])
        self.assertEqual(points[1].daily, 3)
        self.assertIsNone(points[2].daily)

    def test_previous_week_curve(self):
        values = dict(self.values)
        values["2025-05-29.2"] = 1
        values["2025-06-02"] = 2
        points = project_cumulative(
            slots=self.slots,
            slot_keys=self.keys,
            values=values,
            prev_slot_keys=self.prev_keys,
            show_prev_week=True,
        )
        self.assertEqual([point.prev_cumulative for point in points], [1, 1, 3, 3, 3, 3])

    def test_serialized_point(self):
        point = project_cumulative(slots=self.slots, slot_keys=self.keys, values=self.values)[0]
        self.assertEqual(
            point.to_dict(),
            {
                "slotIndex": 0,
                "label": "Thu PM",
                "dateKey": "2025-06-05.2",
                "dailyValue": 5,
                "cumulative": 5,
                "quota": None,
                "daily": None,
                "prevCumulative": None,
            },
        )


class ImportParsingTests(SimpleTestCase):
    def test_two_rows_and_one_skipped(self):
        result = parse_import_text("15/06/2025,100\n2025-06-16,120\nbad,xyz")
        self.assertEqual(
            [(row.date, row.value) for row in result.rows],
            [(date(2025, 6, 15), 100.0), (date(2025, 6, 16), 120.0)],
        )
        self.assertEqual(result.skipped, 1)

    def test_header_and_separators(self):
        result = parse_import_text('Date;Value\n"2025-06-01";"4"\n12.06.25\t7\n\n')
        self.assertEqual(
            [(row.date, row.value) for row in result.rows],
            [(date(2025, 6, 1), 4.0), (date(2025, 6, 12), 7.0)],
        )
        self.assertEqual(result.skipped, 0)

    def test_rejects_impossible_dates_and_non_finite_values(self):
        result = parse_import_text("2025-06-01,1\n31/02/2025,5\n2025-06-02,inf\n2025-06-03")
        self.assertEqual(len(result.rows), 1)
        self.assertEqual(result.skipped, 3)

    def test_flexible_dates(self):
        self.assertEqual(parse_flexible_date("2025/6/3"), date(2025, 6, 3))
        self.assertEqual(parse_flexible_date("1-2-2024"), date(2024, 2, 1))
        self.assertEqual(parse_flexible_date("01/02/49"), date(2049, 2, 1))
        self.assertEqual(parse_flexible_date("01/02/60"), date(1960, 2, 1))
        self.assertIsNone(parse_flexible_date("June 3"))

    def test_empty_text(self):
        result = parse_import_text("   \n")
        self.assertEqual(result.rows, [])
        self.assertEqual(result.skipped, 0)


class DateRangeTests(SimpleTestCase):
    def test_presets(self):
        today = date(2025, 6, 12)
        self.assertEqual(resolve_date_range("7d", today), (date(2025, 6, 5), today))
        self.assertEqual(resolve_date_range("12w", today), (date(2025, 3, 20), today))
        self.assertEqual(resolve_date_range("12m", today), (date(2024, 6, 12), today))

    def test_custom_range(self):
        today = date(2025, 6, 12)
        start, end = date(2025, 1, 1), date(2025, 2, 1)
        self.assertEqual(resolve_date_range("custom", today, custom_start=start, custom_end=end), (start, end))
        self.assertEqual(resolve_date_range("custom", today, custom_start=start), (date(2025, 5, 13), today))

    def test_default_lookback(self):
        today = date(2025, 6, 12)
        self.assertEqual(default_lookback_start("daily", today), date(2025, 5, 13))
        self.assertEqual(default_lookback_start("weekly", today), date(2025, 3, 20))
        self.assertEqual(default_lookback_start("monthly", today), date(2024, 6, 12))


class FormattingTests(SimpleTestCase):
    def test_stat_values(self):
        self.assertEqual(format_stat_value(1234, is_money=True), "$1,234")
        self.assertEqual(format_stat_value(12.5, is_percentage=True), "12.5%")
        self.assertEqual(format_stat_value(3, is_money=True, is_percentage=True), "$3%")
        self.assertEqual(format_stat_value(None), "")

    def test_boundary_hours(self):
        self.assertEqual(
            [format_boundary_hour(hour) for hour in (0, 9, 12, 14)],
            ["12am", "9am", "12pm", "2pm"],
        )

    def test_date_formats(self):
        day = date(2025, 6, 5)
        self.assertEqual(format_date(day), "5-Jun-25")
        self.assertEqual(format_date(day, DATE_FORMAT_LONG), "Jun 5, 2025")
        self.assertEqual(format_date(day, DATE_FORMAT_NUMERIC), "05/06/25")
        self.assertEqual(format_date(day, DATE_FORMAT_ISO), "2025-06-05")
        self.assertEqual(week_ending_title(date(2025, 6, 12)), "W/E 12-Jun-25")
