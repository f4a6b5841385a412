from django.db import models

from apps.accounts.models import Member
from apps.common.date_keys import DateKey
from apps.common.series import PERIOD_CHOICES, PERIOD_DAILY


class StatDefinition(models.Model):
    name = models.CharField(max_length=128)
    abbreviation = models.CharField(max_length=32, blank=True)
    owner = models.ForeignKey(
        Member,
        on_delete=models.CASCADE,
        related_name="stats",
    )
    created_by = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_stats",
    )
    division = models.PositiveSmallIntegerField(null=True, blank=True)
    department = models.PositiveSmallIntegerField(null=True, blank=True)
    gds = models.BooleanField(default=False)
    is_money = models.BooleanField(default=False)
    is_percentage = models.BooleanField(default=False)
    is_inverted = models.BooleanField(default=False)
    linked_stat_ids = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_composite(self) -> bool:
        return bool(self.linked_stat_ids)


class StatEntry(models.Model):
    stat = models.ForeignKey(
        StatDefinition,
        on_delete=models.CASCADE,
        related_name="entries",
    )
    date = models.DateField()
    is_second_half = models.BooleanField(default=False)
    value = models.FloatField()
    period_type = models.CharField(max_length=16, choices=PERIOD_CHOICES, default=PERIOD_DAILY)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "is_second_half"]
        constraints = [
            models.UniqueConstraint(
                fields=["stat", "date", "is_second_half", "period_type"],
                name="unique_stat_entry_key",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.stat.name} {self.date_key} ({self.period_type}): {self.value}"

    @property
    def date_key(self) -> DateKey:
        return DateKey(self.date, self.is_second_half)

    def to_dict(self):
        return {
            "id": self.id,
            "statId": self.stat_id,
            "date": str(self.date_key),
            "value": self.value,
            "periodType": self.period_type,
        }


class StatQuota(models.Model):
    stat = models.ForeignKey(
        StatDefinition,
        on_delete=models.CASCADE,
        related_name="quotas",
    )
    week_ending_date = models.DateField()
    quotas = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-week_ending_date"]
        unique_together = ("stat", "week_ending_date")

    def __str__(self) -> str:
        return f"{self.stat.name} W/E {self.week_ending_date}"

    def to_dict(self):
        return {
            "id": self.id,
            "statId": self.stat_id,
            "weekEndingDate": self.week_ending_date.isoformat(),
            "quotas": self.quotas,
        }
