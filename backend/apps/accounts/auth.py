from functools import wraps

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.module_loading import import_string

from .models import Member, MemberRelationship

SESSION_MEMBER_KEY = "member_id"
DEFAULT_AUTHORIZATION_CHECK = "apps.accounts.auth.can_manage_stats_for"


def require_member(view_func):
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        member_id = request.session.get(SESSION_MEMBER_KEY)
        member = Member.objects.filter(pk=member_id).first() if member_id else None
        if member is None:
            return JsonResponse({"error": "Unauthorized"}, status=401)
        request.member = member
        return view_func(request, *args, **kwargs)

    return wrapper


def can_manage_stats_for(actor: Member, target: Member, is_admin: bool) -> bool:
    if is_admin or actor.pk == target.pk:
        return True
    return MemberRelationship.objects.filter(senior=actor, junior=target).exists()


def authorization_check():
    return import_string(getattr(settings, "STATS_AUTHORIZATION_CHECK", DEFAULT_AUTHORIZATION_CHECK))


def junior_ids(member: Member) -> list[int]:
    return list(MemberRelationship.objects.filter(senior=member).values_list("junior_id", flat=True))
