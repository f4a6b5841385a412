from django import forms

from apps.common.ranges import RANGE_CUSTOM, RANGE_PRESETS
from apps.common.series import PERIOD_CHOICES, PERIOD_DAILY

# Field names mirror the camelCase keys of the JSON API.

RANGE_CHOICES = [(preset, preset) for preset in RANGE_PRESETS]


class PeriodTypeMixin:
    def clean_periodType(self):
        return self.cleaned_data.get("periodType") or PERIOD_DAILY


class DefinitionForm(forms.Form):
    name = forms.CharField(max_length=128, required=False)
    abbreviation = forms.CharField(max_length=32, required=False)
    ownerId = forms.IntegerField(required=False)
    division = forms.IntegerField(min_value=0, required=False)
    department = forms.IntegerField(min_value=0, required=False)
    gds = forms.BooleanField(required=False)
    isMoney = forms.BooleanField(required=False)
    isPercentage = forms.BooleanField(required=False)
    isInverted = forms.BooleanField(required=False)
    linkedStatIds = forms.JSONField(required=False)

    FIELD_MAP = {
        "name": "name",
        "abbreviation": "abbreviation",
        "division": "division",
        "department": "department",
        "gds": "gds",
        "isMoney": "is_money",
        "isPercentage": "is_percentage",
        "isInverted": "is_inverted",
        "linkedStatIds": "linked_stat_ids",
    }

    def definition_fields(self, *, only_present: bool = False) -> dict:
        """Cleaned values keyed by model field name.

        With ``only_present`` the result is limited to keys sent by the client,
        so a partial update leaves other fields untouched.
        """
        fields = {}
        for key, name in self.FIELD_MAP.items():
            if only_present and key not in self.data:
                continue
            value = self.cleaned_data.get(key)
            if name == "abbreviation":
                value = value or ""
            if name == "linked_stat_ids":
                value = value or []
            fields[name] = value
        return fields


class EntryQueryForm(PeriodTypeMixin, forms.Form):
    statId = forms.IntegerField()
    periodType = forms.ChoiceField(choices=PERIOD_CHOICES, required=False)
    startDate = forms.DateField(required=False)
    endDate = forms.DateField(required=False)
    recent = forms.BooleanField(required=False)


class EntryForm(PeriodTypeMixin, forms.Form):
    statId = forms.IntegerField()
    date = forms.CharField(max_length=16)
    value = forms.FloatField()
    periodType = forms.ChoiceField(choices=PERIOD_CHOICES, required=False)


class BulkImportForm(PeriodTypeMixin, forms.Form):
    statId = forms.IntegerField()
    periodType = forms.ChoiceField(choices=PERIOD_CHOICES, required=False)
    entries = forms.JSONField(required=False)
    text = forms.CharField(required=False, strip=False)

    def clean(self):
        cleaned_data = super().clean()
        entries = cleaned_data.get("entries")
        if entries is not None and not isinstance(entries, list):
            self.add_error("entries", "entries must be a list")
        elif not entries and not cleaned_data.get("text"):
            raise forms.ValidationError("Provide entries or text to import")
        return cleaned_data


class EntryValueForm(forms.Form):
    id = forms.IntegerField()
    value = forms.FloatField()


class QuotaQueryForm(forms.Form):
    statId = forms.IntegerField()
    weekEndingDate = forms.DateField(required=False)


class QuotaForm(forms.Form):
    statId = forms.IntegerField()
    weekEndingDate = forms.DateField()
    quotas = forms.JSONField()


class WeeklyReportForm(forms.Form):
    weekOffset = forms.IntegerField(required=False)
    showPrevWeek = forms.BooleanField(required=False)
    showDailyValues = forms.BooleanField(required=False)


class ChartRangeForm(PeriodTypeMixin, forms.Form):
    periodType = forms.ChoiceField(choices=PERIOD_CHOICES, required=False)
    range = forms.ChoiceField(choices=RANGE_CHOICES, required=False)
    startDate = forms.DateField(required=False)
    endDate = forms.DateField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        start, end = cleaned_data.get("startDate"), cleaned_data.get("endDate")
        if start and end and start > end:
            self.add_error("endDate", "endDate must not be before startDate")
        if (start or end) and not cleaned_data.get("range"):
            cleaned_data["range"] = RANGE_CUSTOM
        return cleaned_data


class OverlayForm(ChartRangeForm):
    overlayStatId = forms.IntegerField()
    offset = forms.IntegerField(required=False)
