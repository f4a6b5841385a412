import logging
from dataclasses import dataclass
from datetime import date

from django.db import DatabaseError, transaction
from django.db.models import Q

from apps.common.date_keys import DateKey

from .exceptions import StatNotFound
from .models import StatDefinition, StatEntry, StatQuota

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0

    def to_dict(self):
        return {"imported": self.imported, "skipped": self.skipped}


def upsert_entry(stat: StatDefinition, date_key: DateKey, value: float, period_type: str) -> StatEntry:
    entry, created = StatEntry.objects.update_or_create(
        stat=stat,
        date=date_key.date,
        is_second_half=date_key.is_second_half,
        period_type=period_type,
        defaults={"value": value},
    )
    logger.debug(
        "%s stat entry %s for stat %s (%s) = %s",
        "Created" if created else "Updated",
        date_key,
        stat.pk,
        period_type,
        value,
    )
    return entry


def range_query(stat: StatDefinition, start: date | None = None, end: date | None = None, period_type: str | None = None):
    entries = StatEntry.objects.filter(stat=stat)
    if period_type:
        entries = entries.filter(period_type=period_type)
    if start:
        entries = entries.filter(date__gte=start)
    if end:
        entries = entries.filter(date__lte=end)
    return entries.order_by("date", "is_second_half")


def last_n_before(
    stat: StatDefinition,
    reference_date: date,
    period_type: str,
    n: int,
    *,
    include_current_nonzero: bool = True,
) -> list[StatEntry]:
    eligible = Q(date__lt=reference_date)
    if include_current_nonzero:
        eligible |= Q(date=reference_date) & ~Q(value=0)
    entries = StatEntry.objects.filter(eligible, stat=stat, period_type=period_type)
    return list(entries.order_by("-date", "-is_second_half")[:n])


def bulk_import(stat: StatDefinition, period_type: str, rows) -> ImportResult:
    """Upsert ``(DateKey, value)`` rows, each in its own savepoint."""
    result = ImportResult()
    for date_key, value in rows:
        try:
            with transaction.atomic():
                upsert_entry(stat, date_key, value, period_type)
        except DatabaseError:
            logger.warning("Skipped import row %s for stat %s", date_key, stat.pk, exc_info=True)
            result.skipped += 1
            continue
        result.imported += 1
    logger.info(
        "Imported %s %s entries for stat %s (%s skipped)",
        result.imported,
        period_type,
        stat.pk,
        result.skipped,
    )
    return result


def get_entry(entry_id: int) -> StatEntry:
    entry = StatEntry.objects.select_related("stat__owner").filter(pk=entry_id).first()
    if entry is None:
        raise StatNotFound("Entry not found")
    return entry


def update_entry_value(entry_id: int, value: float) -> StatEntry:
    entry = get_entry(entry_id)
    entry.value = value
    entry.save(update_fields=["value", "updated_at"])
    return entry


def delete_entry(entry_id: int) -> None:
    deleted, _ = StatEntry.objects.filter(pk=entry_id).delete()
    if not deleted:
        raise StatNotFound("Entry not found")


def find_quota(stat: StatDefinition, week_ending: date) -> StatQuota | None:
    # An exact match sorts first; otherwise the latest earlier week applies.
    return (
        StatQuota.objects.filter(stat=stat, week_ending_date__lte=week_ending)
        .order_by("-week_ending_date")
        .first()
    )


def upsert_quota(stat: StatDefinition, week_ending: date, quotas: list[float]) -> StatQuota:
    quota, _ = StatQuota.objects.update_or_create(
        stat=stat,
        week_ending_date=week_ending,
        defaults={"quotas": quotas},
    )
    return quota


def list_quotas(stat: StatDefinition):
    return StatQuota.objects.filter(stat=stat).order_by("-week_ending_date")


def get_quota(quota_id: int) -> StatQuota:
    quota = StatQuota.objects.select_related("stat__owner").filter(pk=quota_id).first()
    if quota is None:
        raise StatNotFound("Quota not found")
    return quota


def delete_quota(quota_id: int) -> None:
    deleted, _ = StatQuota.objects.filter(pk=quota_id).delete()
    if not deleted:
        raise StatNotFound("Quota not found")
