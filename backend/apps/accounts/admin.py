from django.contrib import admin

from .models import Member, MemberRelationship


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("name", "login_id", "is_admin", "org", "week_start_day", "week_start_hour")
    list_filter = ("is_admin", "org")
    search_fields = ("name", "login_id")


@admin.register(MemberRelationship)
class MemberRelationshipAdmin(admin.ModelAdmin):
    list_display = ("senior", "junior", "created_at")
