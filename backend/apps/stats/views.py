import json
from functools import wraps

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from apps.accounts.auth import require_member
from apps.common.ranges import RANGE_CUSTOM, default_lookback_start, resolve_date_range

from . import services
from .exceptions import StatsError, StatValidationError
from .forms import (
    BulkImportForm,
    ChartRangeForm,
    DefinitionForm,
    EntryForm,
    EntryQueryForm,
    EntryValueForm,
    OverlayForm,
    QuotaForm,
    QuotaQueryForm,
    WeeklyReportForm,
)


class InvalidForm(StatValidationError):
    def __init__(self, form):
        super().__init__("Invalid request")
        self.fields = {field: [str(error) for error in errors] for field, errors in form.errors.items()}


def stats_errors(view_func):
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        try:
            return view_func(request, *args, **kwargs)
        except InvalidForm as exc:
            return JsonResponse({"error": exc.message, "fields": exc.fields}, status=exc.status_code)
        except StatsError as exc:
            return JsonResponse({"error": exc.message}, status=exc.status_code)

    return wrapper


def _json_body(request: HttpRequest) -> dict:
    try:
        payload = json.loads(request.body or b"{}")
    except (UnicodeDecodeError, ValueError):
        raise StatValidationError("Request body must be JSON") from None
    if not isinstance(payload, dict):
        raise StatValidationError("Request body must be a JSON object")
    return payload


def _valid(form):
    if not form.is_valid():
        raise InvalidForm(form)
    return form.cleaned_data


def _required_id(request: HttpRequest) -> int:
    try:
        return int(request.GET.get("id", ""))
    except ValueError:
        raise StatValidationError("id is required") from None


def _chart_range(data):
    return resolve_date_range(
        data.get("range") or RANGE_CUSTOM,
        timezone.localdate(),
        custom_start=data.get("startDate"),
        custom_end=data.get("endDate"),
    )


@require_member
@stats_errors
@require_http_methods(["GET", "POST", "PUT", "DELETE"])
def definitions(request: HttpRequest) -> HttpResponse:
    member = request.member

    if request.method == "GET":
        summaries = services.list_definitions(
            member,
            include_all_if_admin=request.GET.get("mine") != "1",
            period_type=request.GET.get("periodType") or "daily",
        )
        return JsonResponse({"stats": [summary.to_dict() for summary in summaries]})

    if request.method == "DELETE":
        services.delete_definition(member, _required_id(request))
        return JsonResponse({"success": True})

    payload = _json_body(request)
    form = DefinitionForm(payload)
    data = _valid(form)

    if request.method == "POST":
        stat = services.create_definition(member, owner_id=data.get("ownerId"), **form.definition_fields())
        return JsonResponse(services.DefinitionSummary(stat).to_dict(), status=201)

    if "id" not in payload:
        raise StatValidationError("id is required")
    stat = services.update_definition(
        member,
        payload["id"],
        owner_id=data.get("ownerId"),
        **form.definition_fields(only_present=True),
    )
    return JsonResponse(services.DefinitionSummary(stat).to_dict())


@require_member
@stats_errors
@require_http_methods(["GET", "POST", "PATCH", "PUT", "DELETE"])
def entries(request: HttpRequest) -> HttpResponse:
    member = request.member

    if request.method == "GET":
        data = _valid(EntryQueryForm(request.GET))
        start = data.get("startDate")
        if data["recent"] and start is None:
            start = default_lookback_start(data["periodType"], timezone.localdate())
        stat_entries = services.get_entries(
            data["statId"],
            period_type=data["periodType"],
            start=start,
            end=data.get("endDate"),
        )
        return JsonResponse({"entries": [entry.to_dict() for entry in stat_entries]})

    if request.method == "DELETE":
        services.delete_entry(member, _required_id(request))
        return JsonResponse({"success": True})

    payload = _json_body(request)

    if request.method == "POST":
        data = _valid(EntryForm(payload))
        entry = services.upsert_entry(member, data["statId"], data["date"], data["value"], data["periodType"])
        return JsonResponse(entry.to_dict())

    if request.method == "PATCH":
        data = _valid(BulkImportForm(payload))
        if data.get("entries"):
            rows = [
                (row.get("date"), row.get("value")) if isinstance(row, dict) else (None, None)
                for row in data["entries"]
            ]
            result = services.bulk_import(member, data["statId"], data["periodType"], rows)
        else:
            result = services.import_text(member, data["statId"], data["periodType"], data["text"])
        return JsonResponse(result.to_dict())

    data = _valid(EntryValueForm(payload))
    services.update_entry_value(member, data["id"], data["value"])
    return JsonResponse({"success": True})


@require_member
@stats_errors
@require_http_methods(["GET", "POST", "DELETE"])
def quotas(request: HttpRequest) -> HttpResponse:
    member = request.member

    if request.method == "GET":
        data = _valid(QuotaQueryForm(request.GET))
        if data.get("weekEndingDate"):
            quota = services.get_quota(data["statId"], data["weekEndingDate"])
            return JsonResponse({"quota": quota.to_dict() if quota else None})
        return JsonResponse({"quotas": [quota.to_dict() for quota in services.list_quotas(data["statId"])]})

    if request.method == "DELETE":
        services.delete_quota(member, _required_id(request))
        return JsonResponse({"success": True})

    data = _valid(QuotaForm(_json_body(request)))
    quota = services.upsert_quota(member, data["statId"], data["weekEndingDate"], data["quotas"])
    return JsonResponse(quota.to_dict())


@require_member
@stats_errors
@require_http_methods(["GET"])
def weekly_report(request: HttpRequest, stat_id: int) -> HttpResponse:
    data = _valid(WeeklyReportForm(request.GET))
    report = services.weekly_report(
        stat_id,
        week_offset=data.get("weekOffset") or 0,
        show_prev_week=data["showPrevWeek"],
        show_daily_values=data["showDailyValues"],
    )
    return JsonResponse(report)


@require_member
@stats_errors
@require_http_methods(["GET"])
def composite(request: HttpRequest, stat_id: int) -> HttpResponse:
    data = _valid(ChartRangeForm(request.GET))
    start, end = _chart_range(data)
    series = services.composite_series(stat_id, period_type=data["periodType"], start=start, end=end)
    series.update({"startDate": start.isoformat(), "endDate": end.isoformat()})
    return JsonResponse(series)


@require_member
@stats_errors
@require_http_methods(["GET"])
def overlay(request: HttpRequest, stat_id: int) -> HttpResponse:
    data = _valid(OverlayForm(request.GET))
    start, end = _chart_range(data)
    series = services.overlay_series(
        stat_id,
        data["overlayStatId"],
        offset=data.get("offset") or 0,
        period_type=data["periodType"],
        start=start,
        end=end,
    )
    return JsonResponse(series)
