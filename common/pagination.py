from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.conf import settings

from .exceptions import ValidationError


def _limits() -> dict:
    return getattr(settings, "PAGINATION", {})


def max_limit() -> int:
    return int(_limits().get("MAX_LIMIT", 100))


def default_limit() -> int:
    return int(_limits().get("DEFAULT_LIMIT", 10))


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    """한 페이지 분량의 결과. has_more 로 다음 페이지 존재 여부를 바로 알려준다."""

    results: List[Any] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total


def page_request(page: Any = None, limit: Any = None, *, default: Optional[int] = None) -> PageRequest:
    # page: 1부터 시작, 정수가 아니거나 1 미만이면 오류
    # limit: 1..MAX_LIMIT 범위로 보정(clamp)
    if page in (None, ""):
        page_no = 1
    else:
        try:
            page_no = int(page)
        except (TypeError, ValueError):
            raise ValidationError("Page must be a positive integer.")
        if page_no < 1:
            raise ValidationError("Page must be a positive integer.")

    if limit in (None, ""):
        size = default or default_limit()
    else:
        try:
            size = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("Limit must be an integer.")
    size = max(1, min(size, max_limit()))
    return PageRequest(page=page_no, limit=size)


def paginate_queryset(qs, req: PageRequest) -> Page:
    # qs 는 이미 정렬되어 있어야 한다(최신순 + id tie-break)
    total = qs.count()
    rows = list(qs[req.offset : req.offset + req.limit]) if req.offset < total else []
    return Page(results=rows, page=req.page, limit=req.limit, total=total)


def page_from_query_params(query_params, *, default: Optional[int] = None) -> PageRequest:
    return page_request(query_params.get("page"), query_params.get("limit"), default=default)


def page_payload(page: Page, serializer_class, context: Optional[dict] = None) -> dict:
    data = serializer_class(page.results, many=True, context=context or {}).data
    return {"results": data, "page": page.page, "limit": page.limit, "total": page.total, "has_more": page.has_more}
