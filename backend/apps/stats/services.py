"""Service boundary for stats.

Every mutating call validates its input and consults the authorization
collaborator before touching the store, so a rejected call leaves no partial
state behind. Read calls return model instances or plain dicts ready for
``JsonResponse``.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from apps.accounts.auth import authorization_check, junior_ids
from apps.accounts.models import Member
from apps.common.csv_import import parse_import_text
from apps.common.cumulative import project_cumulative
from apps.common.date_keys import DateKey, validate_date_key
from apps.common.formatting import format_stat_value, week_ending_title
from apps.common.series import (
    MAX_COMPOSITE_LINES,
    PERIOD_DAILY,
    PERIOD_TYPES,
    merge_composite,
    merge_overlay,
    shift_date,
    shift_overlay,
    split_current_period,
)
from apps.common.slots import DEFAULT_DAY_SKIPPED_OFFSETS, build_slots, slot_dates
from apps.common.trends import analyze_trend
from apps.common.weeks import WeekSettings, localize, week_ending_on_or_after

from . import store
from .exceptions import NotAuthorized, StatNotFound, StatValidationError
from .models import StatDefinition, StatEntry, StatQuota

logger = logging.getLogger(__name__)

MIN_COMPOSITE_LINES = 2
OVERLAY_FETCH_PADDING = timedelta(days=3)
DEFINITION_FIELDS = (
    "name",
    "abbreviation",
    "division",
    "department",
    "gds",
    "is_money",
    "is_percentage",
    "is_inverted",
    "linked_stat_ids",
)


@dataclass(frozen=True)
class DefinitionSummary:
    stat: StatDefinition
    trend: str | None = None
    down_streak: int = 0

    def to_dict(self):
        stat = self.stat
        return {
            "id": stat.id,
            "name": stat.name,
            "abbreviation": stat.abbreviation,
            "ownerId": stat.owner_id,
            "ownerName": stat.owner.name,
            "createdBy": stat.created_by_id,
            "division": stat.division,
            "department": stat.department,
            "gds": stat.gds,
            "isMoney": stat.is_money,
            "isPercentage": stat.is_percentage,
            "isInverted": stat.is_inverted,
            "linkedStatIds": stat.linked_stat_ids or [],
            "trend": self.trend,
            "downStreak": self.down_streak,
        }


def _skipped_offsets():
    return tuple(getattr(settings, "STATS_DAY_ORG_SKIPPED_OFFSETS", DEFAULT_DAY_SKIPPED_OFFSETS))


def get_stat(stat_id) -> StatDefinition:
    stat = StatDefinition.objects.select_related("owner").filter(pk=stat_id).first()
    if stat is None:
        raise StatNotFound("Stat not found")
    return stat


def ensure_can_manage(actor: Member, target: Member) -> None:
    check = authorization_check()
    if not check(actor, target, actor.is_admin):
        logger.warning("Member %s may not manage stats for member %s", actor.pk, target.pk)
        raise NotAuthorized("Not authorized to manage stats for this user")


def clean_period_type(period_type) -> str:
    if period_type not in PERIOD_TYPES:
        raise StatValidationError(f"Invalid periodType: {period_type!r}")
    return period_type


def clean_value(value) -> float:
    if isinstance(value, bool):
        raise StatValidationError("value must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise StatValidationError("value must be a number") from None
    if not math.isfinite(number):
        raise StatValidationError("value must be a finite number")
    return number


def owner_week_settings(owner: Member) -> WeekSettings:
    try:
        return owner.week_settings()
    except ValueError as exc:
        raise StatValidationError(f"Invalid week settings for member {owner.pk}: {exc}") from None


def clean_date_key(raw, stat: StatDefinition) -> DateKey:
    if isinstance(raw, DateKey):
        key = raw
    elif isinstance(raw, date):
        key = DateKey(raw)
    else:
        try:
            key = DateKey.parse(raw)
        except (TypeError, ValueError):
            raise StatValidationError(f"Invalid date: {raw!r}") from None
    try:
        validate_date_key(key, owner_week_settings(stat.owner))
    except ValueError as exc:
        raise StatValidationError(str(exc)) from None
    return key


def _ensure_has_entries(stat: StatDefinition) -> None:
    if stat.is_composite:
        raise StatValidationError("Composite stats have no entries of their own")


def get_entries(stat_id, period_type=None, start=None, end=None) -> list[StatEntry]:
    stat = get_stat(stat_id)
    if period_type is not None:
        clean_period_type(period_type)
    return list(store.range_query(stat, start, end, period_type))


def upsert_entry(actor: Member, stat_id, date_key, value, period_type) -> StatEntry:
    stat = get_stat(stat_id)
    _ensure_has_entries(stat)
    period_type = clean_period_type(period_type)
    key = clean_date_key(date_key, stat)
    number = clean_value(value)
    ensure_can_manage(actor, stat.owner)
    return store.upsert_entry(stat, key, number, period_type)


def bulk_import(actor: Member, stat_id, period_type, rows) -> store.ImportResult:
    """Import ``(date, value)`` rows; unusable rows are counted, not raised."""
    stat = get_stat(stat_id)
    _ensure_has_entries(stat)
    period_type = clean_period_type(period_type)
    ensure_can_manage(actor, stat.owner)

    valid_rows = []
    skipped = 0
    for raw_date, raw_value in rows:
        try:
            valid_rows.append((clean_date_key(raw_date, stat), clean_value(raw_value)))
        except StatValidationError as exc:
            logger.warning("Skipped import row for stat %s: %s", stat.pk, exc.message)
            skipped += 1

    result = store.bulk_import(stat, period_type, valid_rows)
    result.skipped += skipped
    return result


def import_text(actor: Member, stat_id, period_type, text: str) -> store.ImportResult:
    parsed = parse_import_text(text)
    if parsed.skipped:
        logger.warning("Skipped %s unparseable import lines for stat %s", parsed.skipped, stat_id)
    result = bulk_import(actor, stat_id, period_type, [(row.date, row.value) for row in parsed.rows])
    result.skipped += parsed.skipped
    return result


def update_entry_value(actor: Member, entry_id, value) -> None:
    entry = store.get_entry(entry_id)
    number = clean_value(value)
    ensure_can_manage(actor, entry.stat.owner)
    store.update_entry_value(entry.pk, number)


def delete_entry(actor: Member, entry_id) -> None:
    entry = store.get_entry(entry_id)
    ensure_can_manage(actor, entry.stat.owner)
    store.delete_entry(entry.pk)


def slot_count_for(owner: Member) -> int:
    return len(build_slots(owner.org, owner_week_settings(owner), skipped_offsets=_skipped_offsets()))


def get_quota(stat_id, week_ending: date) -> StatQuota | None:
    return store.find_quota(get_stat(stat_id), week_ending)


def list_quotas(stat_id) -> list[StatQuota]:
    return list(store.list_quotas(get_stat(stat_id)))


def upsert_quota(actor: Member, stat_id, week_ending: date, quotas) -> StatQuota:
    stat = get_stat(stat_id)
    if not isinstance(quotas, (list, tuple)):
        raise StatValidationError("quotas must be a list of numbers")
    values = [clean_value(value) for value in quotas]
    expected = slot_count_for(stat.owner)
    if len(values) != expected:
        raise StatValidationError(f"Expected {expected} quota values, got {len(values)}")
    ensure_can_manage(actor, stat.owner)
    return store.upsert_quota(stat, week_ending, values)


def delete_quota(actor: Member, quota_id) -> None:
    quota = store.get_quota(quota_id)
    ensure_can_manage(actor, quota.stat.owner)
    store.delete_quota(quota.pk)


def visible_definitions(actor: Member, *, include_all_if_admin: bool = True):
    stats = StatDefinition.objects.select_related("owner")
    if actor.is_admin and include_all_if_admin:
        return stats.all()
    return stats.filter(Q(owner=actor) | Q(created_by=actor) | Q(owner_id__in=junior_ids(actor)))


def list_definitions(
    actor: Member,
    include_all_if_admin: bool = True,
    period_type: str = PERIOD_DAILY,
    today: date | None = None,
) -> list[DefinitionSummary]:
    period_type = clean_period_type(period_type)
    today = today or timezone.localdate()
    lookback = getattr(settings, "STATS_TREND_LOOKBACK", 4)

    summaries = []
    for stat in visible_definitions(actor, include_all_if_admin=include_all_if_admin):
        if stat.is_composite:
            summaries.append(DefinitionSummary(stat))
            continue
        recent = store.last_n_before(stat, today, period_type, lookback)
        result = analyze_trend([entry.value for entry in recent], is_inverted=stat.is_inverted)
        summaries.append(DefinitionSummary(stat, trend=result.trend, down_streak=result.down_streak))
    return summaries


def clean_linked_stat_ids(linked_stat_ids, *, stat_id=None) -> list[int]:
    if not linked_stat_ids:
        return []
    try:
        ids = [int(value) for value in linked_stat_ids]
    except (TypeError, ValueError):
        raise StatValidationError("linkedStatIds must be a list of stat ids") from None
    if not MIN_COMPOSITE_LINES <= len(ids) <= MAX_COMPOSITE_LINES:
        raise StatValidationError(
            f"A composite links {MIN_COMPOSITE_LINES} to {MAX_COMPOSITE_LINES} stats"
        )
    if len(set(ids)) != len(ids):
        raise StatValidationError("linkedStatIds must not repeat a stat")
    if stat_id is not None and stat_id in ids:
        raise StatValidationError("A composite cannot link to itself")

    linked = StatDefinition.objects.in_bulk(ids)
    missing = [value for value in ids if value not in linked]
    if missing:
        raise StatValidationError(f"Linked stats do not exist: {missing}")
    if any(stat.is_composite for stat in linked.values()):
        raise StatValidationError("A composite cannot link to another composite")
    return ids


def _resolve_owner(actor: Member, owner_id) -> Member:
    if owner_id is None:
        return actor
    owner = Member.objects.filter(pk=owner_id).first()
    if owner is None:
        raise StatValidationError("Owner does not exist")
    return owner


def create_definition(actor: Member, *, owner_id=None, **fields) -> StatDefinition:
    if not (fields.get("name") or "").strip():
        raise StatValidationError("name is required")
    owner = _resolve_owner(actor, owner_id)
    fields["linked_stat_ids"] = clean_linked_stat_ids(fields.get("linked_stat_ids"))
    ensure_can_manage(actor, owner)
    values = {name: fields[name] for name in DEFINITION_FIELDS if name in fields}
    values["name"] = values["name"].strip()
    stat = StatDefinition.objects.create(owner=owner, created_by=actor, **values)
    logger.info("Member %s created stat %s (%s)", actor.pk, stat.pk, stat.name)
    return stat


def update_definition(actor: Member, stat_id, *, owner_id=None, **fields) -> StatDefinition:
    stat = get_stat(stat_id)
    if "name" in fields and not (fields["name"] or "").strip():
        raise StatValidationError("name is required")
    if "linked_stat_ids" in fields:
        fields["linked_stat_ids"] = clean_linked_stat_ids(fields["linked_stat_ids"], stat_id=stat.pk)
        if fields["linked_stat_ids"] and stat.entries.exists():
            raise StatValidationError("A stat with entries cannot become a composite")
    new_owner = _resolve_owner(actor, owner_id) if owner_id is not None else None

    ensure_can_manage(actor, stat.owner)
    if new_owner is not None:
        ensure_can_manage(actor, new_owner)
        stat.owner = new_owner
    for name in DEFINITION_FIELDS:
        if name in fields:
            setattr(stat, name, fields[name].strip() if name == "name" else fields[name])
    stat.save()
    return stat


def delete_definition(actor: Member, stat_id) -> None:
    stat = get_stat(stat_id)
    ensure_can_manage(actor, stat.owner)
    stat.delete()
    logger.info("Member %s deleted stat %s", actor.pk, stat_id)


def report_week_ending(now: datetime, owner: Member, week_offset: int = 0) -> date:
    week_settings = owner_week_settings(owner)
    if week_settings.timezone:
        now = localize(now, week_settings)
    elif timezone.is_aware(now):
        now = timezone.localtime(now)
    boundary_hour = week_settings.week_end_hour if week_settings.splits_boundary_day else None
    week_ending = week_ending_on_or_after(now, week_settings.week_end_day, boundary_hour)
    return week_ending + timedelta(days=7 * week_offset)


def weekly_report(
    stat_id,
    *,
    now: datetime | None = None,
    week_offset: int = 0,
    show_prev_week: bool = False,
    show_daily_values: bool = False,
):
    stat = get_stat(stat_id)
    _ensure_has_entries(stat)
    owner = stat.owner
    week_settings = owner_week_settings(owner)
    week_ending = report_week_ending(now or timezone.now(), owner, week_offset)

    slots = build_slots(owner.org, week_settings, skipped_offsets=_skipped_offsets())
    slot_keys = slot_dates(week_ending, slots, week_settings)
    prev_slot_keys = slot_dates(week_ending - timedelta(days=7), slots, week_settings)

    lookback_days = getattr(settings, "STATS_REPORT_LOOKBACK_DAYS", 21)
    entries = store.range_query(stat, week_ending - timedelta(days=lookback_days), week_ending, PERIOD_DAILY)
    values = {str(entry.date_key): entry.value for entry in entries}
    quota = store.find_quota(stat, week_ending)

    points = project_cumulative(
        slots=slots,
        slot_keys=slot_keys,
        values=values,
        quotas=quota.quotas if quota else [],
        prev_slot_keys=prev_slot_keys,
        show_prev_week=show_prev_week,
        show_daily_values=show_daily_values,
    )
    week_total = sum(point.daily_value for point in points if point.daily_value is not None)
    return {
        "statId": stat.id,
        "name": stat.name,
        "org": owner.org,
        "weekEndingDate": week_ending.isoformat(),
        "title": week_ending_title(week_ending, owner.date_format),
        "weekTotal": week_total,
        "weekTotalLabel": format_stat_value(week_total, is_money=stat.is_money, is_percentage=stat.is_percentage),
        "quotaWeekEndingDate": quota.week_ending_date.isoformat() if quota else None,
        "slots": [slot.to_dict() for slot in slots],
        "points": [point.to_dict() for point in points],
    }


def _series(stat: StatDefinition, period_type: str, start: date | None, end: date | None):
    return [(entry.date_key, entry.value) for entry in store.range_query(stat, start, end, period_type)]


def composite_series(stat_id, *, period_type: str = PERIOD_DAILY, start: date | None = None, end: date | None = None):
    stat = get_stat(stat_id)
    period_type = clean_period_type(period_type)
    if not stat.is_composite:
        raise StatValidationError("Stat is not a composite")

    linked = StatDefinition.objects.in_bulk(stat.linked_stat_ids)
    lines = []
    for stat_ref in stat.linked_stat_ids:
        line_stat = linked.get(stat_ref)
        if line_stat is None:
            raise StatNotFound(f"Linked stat {stat_ref} not found")
        lines.append(line_stat)

    rows = merge_composite(_series(line_stat, period_type, start, end) for line_stat in lines)
    return {
        "statId": stat.id,
        "name": stat.name,
        "lines": [
            {
                "statId": line_stat.id,
                "name": line_stat.name,
                "isInverted": line_stat.is_inverted,
                "isMoney": line_stat.is_money,
                "isPercentage": line_stat.is_percentage,
                "axis": "primary" if index == 0 else "secondary",
            }
            for index, line_stat in enumerate(lines)
        ],
        "rows": [row.to_dict() for row in rows],
    }


def overlay_series(
    stat_id,
    overlay_stat_id,
    *,
    offset: int,
    period_type: str = PERIOD_DAILY,
    start: date,
    end: date,
    today: date | None = None,
):
    stat = get_stat(stat_id)
    overlay_stat = get_stat(overlay_stat_id)
    period_type = clean_period_type(period_type)
    today = today or timezone.localdate()

    primary = _series(stat, period_type, start, end)
    completed, current = split_current_period(
        primary,
        today=today,
        period_type=period_type,
        week_end_day=owner_week_settings(stat.owner).week_end_day,
    )

    fetch_start = shift_date(start, offset, period_type) - OVERLAY_FETCH_PADDING
    fetch_end = shift_date(end, offset, period_type) + OVERLAY_FETCH_PADDING
    overlay_points = shift_overlay(
        _series(overlay_stat, period_type, fetch_start, fetch_end),
        offset=offset,
        period_type=period_type,
        start=start,
        end=end,
    )
    return {
        "statId": stat.id,
        "overlayStatId": overlay_stat.id,
        "offset": offset,
        "periodType": period_type,
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "rows": merge_overlay(completed, current, overlay_points),
        "overlay": [point.to_dict() for point in overlay_points],
    }
