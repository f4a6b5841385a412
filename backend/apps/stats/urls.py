from django.urls import path

from .views import composite, definitions, entries, overlay, quotas, weekly_report

urlpatterns = [
    path("", definitions, name="stat_definitions"),
    path("entries/", entries, name="stat_entries"),
    path("quotas/", quotas, name="stat_quotas"),
    path("<int:stat_id>/weekly-report/", weekly_report, name="stat_weekly_report"),
    path("<int:stat_id>/composite/", composite, name="stat_composite"),
    path("<int:stat_id>/overlay/", overlay, name="stat_overlay"),
]
