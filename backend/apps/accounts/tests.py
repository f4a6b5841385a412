from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse

from apps.common.weeks import WeekSettings

from .auth import authorization_check, can_manage_stats_for
from .models import Member, MemberRelationship


def deny_everyone(actor, target, is_admin):
    return False


class MemberTests(TestCase):
    def test_week_settings_defaults_to_thursday_2pm(self):
        member = Member.objects.create(name="Ann", login_id="ann")
        self.assertEqual(member.week_settings(), WeekSettings())
        self.assertTrue(member.week_settings().splits_boundary_day)

    def test_week_settings_carries_timezone(self):
        member = Member.objects.create(
            name="Ben",
            login_id="ben",
            week_start_day=1,
            week_start_hour=0,
            week_end_day=1,
            week_end_hour=0,
            timezone="Europe/London",
        )
        settings = member.week_settings()
        self.assertEqual(settings.timezone, "Europe/London")
        self.assertFalse(settings.splits_boundary_day)

    def test_timezone_must_be_a_known_zone(self):
        member = Member(name="Cal", login_id="cal", timezone="Mars/Olympus")
        with self.assertRaises(ValidationError) as ctx:
            member.full_clean()
        self.assertIn("timezone", ctx.exception.message_dict)

        member.timezone = "Asia/Tokyo"
        member.full_clean()


class AuthorizationTests(TestCase):
    def setUp(self):
        self.senior = Member.objects.create(name="Senior", login_id="senior")
        self.junior = Member.objects.create(name="Junior", login_id="junior")
        self.other = Member.objects.create(name="Other", login_id="other")
        MemberRelationship.objects.create(senior=self.senior, junior=self.junior)

    def test_member_manages_own_stats(self):
        self.assertTrue(can_manage_stats_for(self.other, self.other, False))

    def test_senior_manages_junior_but_not_the_reverse(self):
        self.assertTrue(can_manage_stats_for(self.senior, self.junior, False))
        self.assertFalse(can_manage_stats_for(self.junior, self.senior, False))

    def test_admin_manages_anyone(self):
        self.assertTrue(can_manage_stats_for(self.other, self.senior, True))

    @override_settings(STATS_AUTHORIZATION_CHECK="apps.accounts.tests.deny_everyone")
    def test_authorization_check_is_configurable(self):
        check = authorization_check()
        self.assertFalse(check(self.senior, self.senior, True))


class MemberGuardTests(TestCase):
    def test_api_requires_member_session(self):
        response = self.client.get(reverse("stat_definitions"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_unknown_member_id_is_rejected(self):
        session = self.client.session
        session["member_id"] = 9999
        session.save()
        response = self.client.get(reverse("stat_definitions"))
        self.assertEqual(response.status_code, 401)

    def test_member_session_passes_guard(self):
        member = Member.objects.create(name="Ann", login_id="ann")
        session = self.client.session
        session["member_id"] = member.id
        session.save()
        response = self.client.get(reverse("stat_definitions"))
        self.assertEqual(response.status_code, 200)
