import uuid

from django.contrib.auth import get_user_model
from django.db.models import Q

from common.exceptions import NotFoundError, ValidationError
from common.pagination import Page, PageRequest, paginate_queryset

User = get_user_model()


def _as_uuid(value):
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def resolve_user(identifier) -> User:
    """UUID 또는 username 으로 사용자를 찾는다. 없으면 NotFoundError."""
    if isinstance(identifier, User):
        return identifier
    if identifier in (None, ""):
        raise NotFoundError("User not found.")

    user_id = _as_uuid(identifier)
    qs = User.objects.filter(is_active=True)
    user = qs.filter(id=user_id).first() if user_id else qs.filter(username=str(identifier)).first()
    if user is None:
        raise NotFoundError("User not found.")
    return user


def search_users(query, req: PageRequest) -> Page:
    # username / display_name 부분 일치(대소문자 무시), username 오름차순
    text = query.strip() if isinstance(query, str) else ""
    if not text:
        raise ValidationError("Search query is required.")
    qs = User.objects.filter(Q(username__icontains=text) | Q(display_name__icontains=text), is_active=True).order_by("username", "id")
    return paginate_queryset(qs, req)
