import tempfile
from datetime import date, datetime
from datetime import timezone as dt_timezone
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import Member, MemberRelationship
from apps.common.date_keys import DateKey

from . import services, store
from .exceptions import NotAuthorized, StatNotFound, StatValidationError
from .models import StatDefinition, StatEntry, StatQuota

WEEKLY_SCENARIO = {
    DateKey(date(2025, 6, 5), True): 5,
    DateKey(date(2025, 6, 6)): 3,
    DateKey(date(2025, 6, 9)): 4,
    DateKey(date(2025, 6, 10)): 2,
    DateKey(date(2025, 6, 11)): 6,
    DateKey(date(2025, 6, 12)): 1,
}


class StatsTestMixin:
    def setUp(self):
        self.owner = Member.objects.create(name="Owner", login_id="owner", org="Day")
        self.other = Member.objects.create(name="Other", login_id="other")
        self.stat = StatDefinition.objects.create(name="Gross Income", owner=self.owner, created_by=self.owner)

    def login(self, member):
        session = self.client.session
        session["member_id"] = member.id
        session.save()

    def add_entries(self, stat, values, period_type="daily"):
        for key, value in values.items():
            store.upsert_entry(stat, key, value, period_type)


class EntryStoreTests(StatsTestMixin, TestCase):
    def test_upsert_is_idempotent(self):
        key = DateKey(date(2025, 6, 10))
        store.upsert_entry(self.stat, key, 10, "daily")
        store.upsert_entry(self.stat, key, 12, "daily")
        self.assertEqual(StatEntry.objects.count(), 1)
        self.assertEqual(StatEntry.objects.get().value, 12)

    def test_period_types_are_stored_separately(self):
        key = DateKey(date(2025, 6, 12))
        store.upsert_entry(self.stat, key, 10, "daily")
        store.upsert_entry(self.stat, key, 70, "weekly")
        self.assertEqual(StatEntry.objects.count(), 2)

    def test_range_query_orders_split_halves(self):
        self.add_entries(
            self.stat,
            {
                DateKey(date(2025, 6, 13)): 3,
                DateKey(date(2025, 6, 12), True): 2,
                DateKey(date(2025, 6, 12)): 1,
            },
        )
        keys = [str(entry.date_key) for entry in store.range_query(self.stat)]
        self.assertEqual(keys, ["2025-06-12", "2025-06-12.2", "2025-06-13"])

        same_day = store.range_query(self.stat, date(2025, 6, 12), date(2025, 6, 12), "daily")
        self.assertEqual([entry.value for entry in same_day], [1, 2])

    def test_last_n_before_includes_nonzero_current_entry(self):
        self.add_entries(self.stat, {DateKey(date(2025, 6, day)): day - 7 for day in range(8, 13)})
        recent = store.last_n_before(self.stat, date(2025, 6, 12), "daily", 4)
        self.assertEqual([entry.value for entry in recent], [5, 4, 3, 2])

        excluded = store.last_n_before(self.stat, date(2025, 6, 12), "daily", 4, include_current_nonzero=False)
        self.assertEqual([entry.value for entry in excluded], [4, 3, 2, 1])

    def test_last_n_before_skips_zero_current_entry(self):
        self.add_entries(
            self.stat,
            {DateKey(date(2025, 6, 11)): 4, DateKey(date(2025, 6, 12)): 0},
        )
        recent = store.last_n_before(self.stat, date(2025, 6, 12), "daily", 4)
        self.assertEqual([entry.value for entry in recent], [4])

    def test_bulk_import_skips_failing_rows(self):
        real_upsert = store.upsert_entry

        def flaky_upsert(stat, date_key, value, period_type):
            if value < 0:
                raise IntegrityError("rejected")
            return real_upsert(stat, date_key, value, period_type)

        rows = [
            (DateKey(date(2025, 6, 1)), 1),
            (DateKey(date(2025, 6, 2)), -1),
            (DateKey(date(2025, 6, 3)), 3),
        ]
        with patch.object(store, "upsert_entry", side_effect=flaky_upsert):
            result = store.bulk_import(self.stat, "daily", rows)

        self.assertEqual(result.to_dict(), {"imported": 2, "skipped": 1})
        self.assertEqual(StatEntry.objects.count(), 2)

    def test_missing_entry_raises(self):
        with self.assertRaises(StatNotFound):
            store.update_entry_value(999, 1)
        with self.assertRaises(StatNotFound):
            store.delete_entry(999)

    def test_quota_falls_back_to_most_recent_week(self):
        store.upsert_quota(self.stat, date(2025, 5, 29), [1] * 6)
        store.upsert_quota(self.stat, date(2025, 6, 5), [2] * 6)
        self.assertEqual(store.find_quota(self.stat, date(2025, 6, 12)).week_ending_date, date(2025, 6, 5))
        self.assertEqual(store.find_quota(self.stat, date(2025, 5, 29)).quotas, [1] * 6)
        self.assertIsNone(store.find_quota(self.stat, date(2025, 5, 22)))

    def test_deleting_stat_cascades(self):
        self.add_entries(self.stat, {DateKey(date(2025, 6, 10)): 1})
        store.upsert_quota(self.stat, date(2025, 6, 12), [0] * 6)
        self.stat.delete()
        self.assertFalse(StatEntry.objects.exists())
        self.assertFalse(StatQuota.objects.exists())


class StatsServiceTests(StatsTestMixin, TestCase):
    def test_upsert_requires_authorization(self):
        with self.assertRaises(NotAuthorized):
            services.upsert_entry(self.other, self.stat.id, "2025-06-10", 5, "daily")
        self.assertFalse(StatEntry.objects.exists())

    def test_senior_can_upsert_for_junior(self):
        MemberRelationship.objects.create(senior=self.other, junior=self.owner)
        entry = services.upsert_entry(self.other, self.stat.id, "2025-06-12.2", 5, "daily")
        self.assertTrue(entry.is_second_half)

    def test_second_half_must_be_boundary_day(self):
        with self.assertRaises(StatValidationError):
            services.upsert_entry(self.owner, self.stat.id, "2025-06-10.2", 5, "daily")

    def test_invalid_period_and_value(self):
        with self.assertRaises(StatValidationError):
            services.upsert_entry(self.owner, self.stat.id, "2025-06-10", 5, "hourly")
        with self.assertRaises(StatValidationError):
            services.upsert_entry(self.owner, self.stat.id, "2025-06-10", "abc", "daily")

    def test_unknown_stat(self):
        with self.assertRaises(StatNotFound):
            services.upsert_entry(self.owner, 999, "2025-06-10", 5, "daily")

    def test_update_and_delete_check_entry_owner(self):
        entry = services.upsert_entry(self.owner, self.stat.id, "2025-06-10", 5, "daily")
        with self.assertRaises(NotAuthorized):
            services.update_entry_value(self.other, entry.id, 9)
        with self.assertRaises(NotAuthorized):
            services.delete_entry(self.other, entry.id)

        services.update_entry_value(self.owner, entry.id, 9)
        entry.refresh_from_db()
        self.assertEqual(entry.value, 9)
        services.delete_entry(self.owner, entry.id)
        self.assertFalse(StatEntry.objects.exists())

    def test_import_text_counts_parse_skips(self):
        result = services.import_text(self.owner, self.stat.id, "daily", "15/06/2025,100\n2025-06-16,120\nbad,xyz")
        self.assertEqual(result.to_dict(), {"imported": 2, "skipped": 1})
        self.assertEqual(
            [(str(entry.date_key), entry.value) for entry in store.range_query(self.stat)],
            [("2025-06-15", 100), ("2025-06-16", 120)],
        )

    def test_bulk_import_counts_invalid_rows(self):
        rows = [("2025-06-10", 1), ("2025-06-10.2", 2), ("nope", 3), ("2025-06-11", "x")]
        result = services.bulk_import(self.owner, self.stat.id, "daily", rows)
        self.assertEqual(result.to_dict(), {"imported": 1, "skipped": 3})

    def test_bulk_import_skips_non_string_dates(self):
        rows = [(20250610, 1), (None, 2), (date(2025, 6, 11), 3)]
        result = services.bulk_import(self.owner, self.stat.id, "daily", rows)
        self.assertEqual(result.to_dict(), {"imported": 1, "skipped": 2})
        self.assertEqual(StatEntry.objects.get().date, date(2025, 6, 11))

    def test_unknown_owner_timezone_is_a_validation_error(self):
        Member.objects.filter(pk=self.owner.pk).update(timezone="Mars/Olympus")
        with self.assertRaises(StatValidationError):
            services.weekly_report(self.stat.id, now=datetime(2025, 6, 10, 12, 0, tzinfo=dt_timezone.utc))

    def test_quota_length_must_match_slot_scheme(self):
        with self.assertRaises(StatValidationError):
            services.upsert_quota(self.owner, self.stat.id, date(2025, 6, 12), [1] * 8)
        quota = services.upsert_quota(self.owner, self.stat.id, date(2025, 6, 12), [1] * 6)
        self.assertEqual(quota.quotas, [1.0] * 6)

    def test_list_definitions_visibility_and_trend(self):
        junior = Member.objects.create(name="Junior", login_id="junior")
        MemberRelationship.objects.create(senior=self.owner, junior=junior)
        junior_stat = StatDefinition.objects.create(name="Junior Stat", owner=junior)
        StatDefinition.objects.create(name="Hidden", owner=self.other)
        self.add_entries(self.stat, {DateKey(date(2025, 6, 9)): 7, DateKey(date(2025, 6, 10)): 10})

        summaries = services.list_definitions(self.owner, today=date(2025, 6, 12))
        by_id = {summary.stat.id: summary for summary in summaries}
        self.assertEqual(set(by_id), {self.stat.id, junior_stat.id})
        self.assertEqual(by_id[self.stat.id].trend, "up")
        self.assertIsNone(by_id[junior_stat.id].trend)

        admin = Member.objects.create(name="Admin", login_id="admin", is_admin=True)
        self.assertEqual(len(services.list_definitions(admin)), 3)
        self.assertEqual(len(services.list_definitions(admin, include_all_if_admin=False)), 0)

    def test_inverted_stat_trend(self):
        self.stat.is_inverted = True
        self.stat.save()
        self.add_entries(self.stat, {DateKey(date(2025, 6, 9)): 7, DateKey(date(2025, 6, 10)): 10})
        summary = services.list_definitions(self.owner, today=date(2025, 6, 12))[0]
        self.assertEqual(summary.trend, "down")
        self.assertEqual(summary.down_streak, 1)

    def test_composite_link_validation(self):
        second = StatDefinition.objects.create(name="Second", owner=self.owner)
        with self.assertRaises(StatValidationError):
            services.create_definition(self.owner, name="One link", linked_stat_ids=[self.stat.id])
        with self.assertRaises(StatValidationError):
            services.create_definition(self.owner, name="Missing", linked_stat_ids=[self.stat.id, 999])

        composite = services.create_definition(self.owner, name="Combined", linked_stat_ids=[self.stat.id, second.id])
        self.assertTrue(composite.is_composite)
        with self.assertRaises(StatValidationError):
            services.create_definition(self.owner, name="Nested", linked_stat_ids=[composite.id, second.id])
        with self.assertRaises(StatValidationError):
            services.update_definition(self.owner, composite.id, linked_stat_ids=[composite.id, second.id])
        with self.assertRaises(StatValidationError):
            services.upsert_entry(self.owner, composite.id, "2025-06-10", 1, "daily")

    def test_create_definition_for_other_member_requires_authorization(self):
        with self.assertRaises(NotAuthorized):
            services.create_definition(self.other, name="Owner stat", owner_id=self.owner.id)
        self.assertEqual(StatDefinition.objects.count(), 1)

    def test_weekly_report_scenario(self):
        self.add_entries(self.stat, WEEKLY_SCENARIO)
        store.upsert_quota(self.stat, date(2025, 6, 12), [2] * 6)

        report = services.weekly_report(self.stat.id, now=datetime(2025, 6, 10, 12, 0, tzinfo=dt_timezone.utc))
        self.assertEqual(report["weekEndingDate"], "2025-06-12")
        self.assertEqual(report["title"], "W/E 12-Jun-25")
        self.assertEqual([point["cumulative"] for point in report["points"]], [5, 8, 12, 14, 20, 21])
        self.assertEqual([point["quota"] for point in report["points"]], [2, 4, 6, 8, 10, 12])
        self.assertEqual(report["weekTotal"], 21)
        self.assertEqual(len(report["slots"]), 6)

    def test_weekly_report_rolls_over_at_boundary_hour(self):
        now = datetime(2025, 6, 12, 15, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(services.weekly_report(self.stat.id, now=now)["weekEndingDate"], "2025-06-19")
        earlier = datetime(2025, 6, 12, 13, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(services.weekly_report(self.stat.id, now=earlier)["weekEndingDate"], "2025-06-12")

    def test_weekly_report_previous_week_without_quota(self):
        self.add_entries(self.stat, WEEKLY_SCENARIO)
        store.upsert_quota(self.stat, date(2025, 6, 12), [2] * 6)

        report = services.weekly_report(
            self.stat.id,
            now=datetime(2025, 6, 10, 12, 0, tzinfo=dt_timezone.utc),
            week_offset=-1,
            show_daily_values=True,
        )
        self.assertEqual(report["weekEndingDate"], "2025-06-05")
        self.assertEqual([point["quota"] for point in report["points"]], [None] * 6)
        self.assertEqual(report["points"][-1]["daily"], None)

    def test_composite_series(self):
        second = StatDefinition.objects.create(name="Second", owner=self.owner)
        composite = StatDefinition.objects.create(
            name="Combined",
            owner=self.owner,
            linked_stat_ids=[self.stat.id, second.id],
        )
        self.add_entries(self.stat, {DateKey(date(2025, 1, 1)): 10})
        self.add_entries(second, {DateKey(date(2025, 1, 2)): 20})

        series = services.composite_series(composite.id, start=date(2025, 1, 1), end=date(2025, 1, 31))
        self.assertEqual(
            series["rows"],
            [
                {"date": "2025-01-01", "line1Value": 10},
                {"date": "2025-01-02", "line2Value": 20},
            ],
        )
        self.assertEqual([line["axis"] for line in series["lines"]], ["primary", "secondary"])

    def test_overlay_series(self):
        previous = StatDefinition.objects.create(name="Last Year", owner=self.owner)
        self.add_entries(self.stat, {DateKey(date(2025, 6, 1)): 1, DateKey(date(2025, 6, 5)): 2})
        self.add_entries(previous, {DateKey(date(2025, 6, 8)): 10})

        series = services.overlay_series(
            self.stat.id,
            previous.id,
            offset=7,
            start=date(2025, 5, 25),
            end=date(2025, 6, 10),
            today=date(2025, 6, 20),
        )
        self.assertEqual(
            series["rows"],
            [
                {"date": "2025-06-01", "value": 1, "overlayValue": 10},
                {"date": "2025-06-05", "value": 2},
            ],
        )
        self.assertEqual(series["overlay"][0]["originalDate"], "2025-06-08")


class StatsApiTests(StatsTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.login(self.owner)

    def test_create_definition(self):
        response = self.client.post(
            reverse("stat_definitions"),
            {"name": "Letters Out", "isMoney": True},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 201)
        stat = StatDefinition.objects.get(name="Letters Out")
        self.assertEqual(stat.owner, self.owner)
        self.assertTrue(stat.is_money)

    def test_update_definition_only_changes_sent_fields(self):
        self.stat.is_money = True
        self.stat.save()
        response = self.client.put(
            reverse("stat_definitions"),
            {"id": self.stat.id, "name": "Renamed"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.stat.refresh_from_db()
        self.assertEqual(self.stat.name, "Renamed")
        self.assertTrue(self.stat.is_money)

    def test_delete_definition(self):
        response = self.client.delete(reverse("stat_definitions") + f"?id={self.stat.id}")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(StatDefinition.objects.exists())

    def test_list_definitions(self):
        response = self.client.get(reverse("stat_definitions"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([stat["name"] for stat in response.json()["stats"]], ["Gross Income"])

    def test_upsert_entry_twice_keeps_one_row(self):
        for value in (10, 15):
            response = self.client.post(
                reverse("stat_entries"),
                {"statId": self.stat.id, "date": "2025-06-10", "value": value, "periodType": "daily"},
                content_type="application/json",
            )
            self.assertEqual(response.status_code, 200)
        self.assertEqual(StatEntry.objects.count(), 1)
        self.assertEqual(StatEntry.objects.get().value, 15)

    def test_upsert_entry_validation_errors(self):
        response = self.client.post(
            reverse("stat_entries"),
            {"statId": self.stat.id, "date": "2025-06-10"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("value", response.json()["fields"])

        response = self.client.post(
            reverse("stat_entries"),
            {"statId": self.stat.id, "date": "10 June", "value": 1},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_upsert_entry_for_other_member_is_forbidden(self):
        self.login(self.other)
        response = self.client.post(
            reverse("stat_entries"),
            {"statId": self.stat.id, "date": "2025-06-10", "value": 1},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertFalse(StatEntry.objects.exists())

    def test_get_entries_in_range(self):
        self.add_entries(
            self.stat,
            {DateKey(date(2025, 6, 1)): 1, DateKey(date(2025, 6, 12), True): 2, DateKey(date(2025, 7, 1)): 3},
        )
        response = self.client.get(
            reverse("stat_entries"),
            {"statId": self.stat.id, "startDate": "2025-06-01", "endDate": "2025-06-30"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["date"] for entry in response.json()["entries"]], ["2025-06-01", "2025-06-12.2"])

    def test_bulk_text_import(self):
        response = self.client.patch(
            reverse("stat_entries"),
            {"statId": self.stat.id, "text": "15/06/2025,100\n2025-06-16,120\nbad,xyz"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"imported": 2, "skipped": 1})

    def test_bulk_entries_import(self):
        response = self.client.patch(
            reverse("stat_entries"),
            {
                "statId": self.stat.id,
                "periodType": "weekly",
                "entries": [{"date": "2025-06-12", "value": 70}, {"date": "oops", "value": 1}],
            },
            content_type="application/json",
        )
        self.assertEqual(response.json(), {"imported": 1, "skipped": 1})
        self.assertEqual(StatEntry.objects.get().period_type, "weekly")

    def test_bulk_entries_import_skips_malformed_rows(self):
        response = self.client.patch(
            reverse("stat_entries"),
            {
                "statId": self.stat.id,
                "entries": [
                    {"date": 20250601, "value": 1},
                    {"date": "2025-06-02", "value": 2},
                    "junk",
                    {"date": "2025-06-03"},
                ],
            },
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"imported": 1, "skipped": 3})
        self.assertEqual([str(entry.date_key) for entry in StatEntry.objects.all()], ["2025-06-02"])

    def test_update_and_delete_entry(self):
        entry = store.upsert_entry(self.stat, DateKey(date(2025, 6, 10)), 1, "daily")
        response = self.client.put(
            reverse("stat_entries"),
            {"id": entry.id, "value": 4},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        entry.refresh_from_db()
        self.assertEqual(entry.value, 4)

        response = self.client.delete(reverse("stat_entries") + f"?id={entry.id}")
        self.assertEqual(response.status_code, 200)
        response = self.client.delete(reverse("stat_entries") + f"?id={entry.id}")
        self.assertEqual(response.status_code, 404)

    def test_quotas(self):
        response = self.client.post(
            reverse("stat_quotas"),
            {"statId": self.stat.id, "weekEndingDate": "2025-06-12", "quotas": [2, 2, 2, 2, 2, 2]},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)

        response = self.client.get(reverse("stat_quotas"), {"statId": self.stat.id, "weekEndingDate": "2025-06-26"})
        self.assertEqual(response.json()["quota"]["weekEndingDate"], "2025-06-12")

        response = self.client.post(
            reverse("stat_quotas"),
            {"statId": self.stat.id, "weekEndingDate": "2025-06-19", "quotas": [1, 2]},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

        quota = StatQuota.objects.get()
        response = self.client.delete(reverse("stat_quotas") + f"?id={quota.id}")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(StatQuota.objects.exists())

    def test_weekly_report(self):
        self.add_entries(self.stat, WEEKLY_SCENARIO)
        store.upsert_quota(self.stat, date(2025, 6, 12), [2] * 6)
        with patch("django.utils.timezone.now", return_value=datetime(2025, 6, 10, 12, 0, tzinfo=dt_timezone.utc)):
            response = self.client.get(
                reverse("stat_weekly_report", args=[self.stat.id]),
                {"showDailyValues": "true"},
            )
        self.assertEqual(response.status_code, 200)
        points = response.json()["points"]
        self.assertEqual([point["cumulative"] for point in points], [5, 8, 12, 14, 20, 21])
        self.assertEqual([point["daily"] for point in points], [5, 3, 4, 2, 6, 1])

    def test_weekly_report_with_unknown_owner_timezone(self):
        Member.objects.filter(pk=self.owner.pk).update(timezone="Mars/Olympus")
        response = self.client.get(reverse("stat_weekly_report", args=[self.stat.id]))
        self.assertEqual(response.status_code, 400)
        self.assertIn("Unknown timezone", response.json()["error"])

    def test_composite(self):
        second = StatDefinition.objects.create(name="Second", owner=self.owner)
        composite = StatDefinition.objects.create(
            name="Combined",
            owner=self.owner,
            linked_stat_ids=[self.stat.id, second.id],
        )
        self.add_entries(self.stat, {DateKey(date(2025, 1, 1)): 10})
        self.add_entries(second, {DateKey(date(2025, 1, 2)): 20})

        response = self.client.get(
            reverse("stat_composite", args=[composite.id]),
            {"startDate": "2025-01-01", "endDate": "2025-01-31"},
        )
        self.assertEqual(response.status_code, 200)
        rows = response.json()["rows"]
        self.assertEqual(len(rows), 2)
        self.assertEqual([sorted(row) for row in rows], [["date", "line1Value"], ["date", "line2Value"]])

    def test_composite_of_plain_stat_is_rejected(self):
        response = self.client.get(reverse("stat_composite", args=[self.stat.id]))
        self.assertEqual(response.status_code, 400)

    def test_overlay(self):
        previous = StatDefinition.objects.create(name="Previous", owner=self.owner)
        self.add_entries(previous, {DateKey(date(2025, 6, 8)): 10})
        response = self.client.get(
            reverse("stat_overlay", args=[self.stat.id]),
            {
                "overlayStatId": previous.id,
                "offset": 7,
                "startDate": "2025-05-25",
                "endDate": "2025-06-10",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["rows"], [{"date": "2025-06-01", "overlayValue": 10}])

    def test_unknown_stat_returns_404(self):
        response = self.client.get(reverse("stat_weekly_report", args=[999]))
        self.assertEqual(response.status_code, 404)


class ImportCommandTests(StatsTestMixin, TestCase):
    def test_imports_csv_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / "entries.csv"
            path.write_text("date,value\n2025-06-10,5\n11/06/2025,6\nbad,1\n", encoding="utf-8")
            out = StringIO()
            call_command("import_stat_entries", self.stat.id, str(path), stdout=out)

        self.assertIn("Imported 2 daily entries", out.getvalue())
        self.assertIn("Skipped 1 rows", out.getvalue())
        self.assertEqual(StatEntry.objects.count(), 2)

    def test_unknown_stat(self):
        with self.assertRaises(CommandError):
            call_command("import_stat_entries", 999, "missing.csv", stdout=StringIO())
