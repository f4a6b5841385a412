from django.contrib import admin

from .models import StatDefinition, StatEntry, StatQuota


@admin.register(StatDefinition)
class StatDefinitionAdmin(admin.ModelAdmin):
    list_display = ("name", "abbreviation", "owner", "division", "department", "gds", "is_inverted")
    list_filter = ("gds", "is_money", "is_percentage", "is_inverted")
    search_fields = ("name", "abbreviation", "owner__name")


@admin.register(StatEntry)
class StatEntryAdmin(admin.ModelAdmin):
    list_display = ("stat", "date", "is_second_half", "period_type", "value", "updated_at")
    list_filter = ("period_type", "is_second_half")
    date_hierarchy = "date"


@admin.register(StatQuota)
class StatQuotaAdmin(admin.ModelAdmin):
    list_display = ("stat", "week_ending_date", "quotas")
