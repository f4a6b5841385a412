from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator
from django.db import models

from apps.common.formatting import DATE_FORMAT_CHOICES, DATE_FORMAT_SHORT
from apps.common.slots import ORG_CHOICES, ORG_FOUNDATION
from apps.common.weeks import WeekSettings


def default_week_settings() -> WeekSettings:
    return WeekSettings.from_dict(getattr(settings, "STATS_DEFAULT_WEEK_SETTINGS", {}))


def default_week_start_day() -> int:
    return default_week_settings().week_start_day


def default_week_start_hour() -> int:
    return default_week_settings().week_start_hour


def default_week_end_day() -> int:
    return default_week_settings().week_end_day


def default_week_end_hour() -> int:
    return default_week_settings().week_end_hour


def validate_timezone(value: str) -> None:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {value}") from None


class Member(models.Model):
    name = models.CharField(max_length=64)
    login_id = models.CharField(max_length=64, unique=True)
    is_admin = models.BooleanField(default=False)
    org = models.CharField(max_length=16, choices=ORG_CHOICES, default=ORG_FOUNDATION)
    week_start_day = models.PositiveSmallIntegerField(default=default_week_start_day, validators=[MaxValueValidator(6)])
    week_start_hour = models.PositiveSmallIntegerField(default=default_week_start_hour, validators=[MaxValueValidator(23)])
    week_end_day = models.PositiveSmallIntegerField(default=default_week_end_day, validators=[MaxValueValidator(6)])
    week_end_hour = models.PositiveSmallIntegerField(default=default_week_end_hour, validators=[MaxValueValidator(23)])
    timezone = models.CharField(max_length=64, blank=True, validators=[validate_timezone])
    date_format = models.CharField(max_length=16, choices=DATE_FORMAT_CHOICES, default=DATE_FORMAT_SHORT)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.login_id})"

    def week_settings(self) -> WeekSettings:
        return WeekSettings(
            week_start_day=self.week_start_day,
            week_start_hour=self.week_start_hour,
            week_end_day=self.week_end_day,
            week_end_hour=self.week_end_hour,
            timezone=self.timezone or None,
        )


class MemberRelationship(models.Model):
    senior = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="junior_links",
    )
    junior = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="senior_links",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("senior", "junior")

    def __str__(self) -> str:
        return f"{self.senior.login_id} -> {self.junior.login_id}"
