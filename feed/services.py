import logging
import uuid
from typing import List, Optional

from django.conf import settings
from django.db.models import Q

from common.pagination import Page, PageRequest, paginate_queryset
from posts.models import Post
from posts.services import FEED_ORDERING, with_engagement
from relations.services import FollowGraph

from .cache import FeedCache

log = logging.getLogger(__name__)

_cache: Optional[FeedCache] = None


def get_cache() -> Optional[FeedCache]:
    # FEED_CACHE_ENABLED 일 때만, 처음 필요할 때 생성
    global _cache
    if not getattr(settings, "FEED_CACHE_ENABLED", False):
        return None
    if _cache is None:
        _cache = FeedCache(settings.FEED_REDIS_URL, settings.FEED_CACHE_TTL_SEC)
    return _cache


class FeedAssembler:
    """
    홈 피드: 내 글(공개/비공개) + 팔로우한 사용자의 공개 글
    디스커버 피드: 전체 공개 글
    둘 다 (created_at desc, id desc) 정렬, 1-indexed page/limit.
    """

    def __init__(self, graph: Optional[FollowGraph] = None, cache: Optional[FeedCache] = None):
        self._graph = graph or FollowGraph()
        self._cache = cache if cache is not None else get_cache()

    def get_home_feed(self, viewer, req: PageRequest) -> Page:
        ver = None
        if self._cache is not None:
            ver = self._cache.home_ver(viewer.id)
            hit = self._cache.get_home(viewer.id, ver, req.page, req.limit)
            if hit is not None:
                return self._rehydrate(hit, viewer, req)

        followees = self._graph.following_ids(viewer.id)
        qs = Post.objects.filter(Q(author_id=viewer.id) | Q(author_id__in=followees, is_public=True))
        page = paginate_queryset(with_engagement(qs, viewer).order_by(*FEED_ORDERING), req)

        if ver is not None:
            self._cache.set_home(viewer.id, ver, req.page, req.limit, {"ids": [str(p.id) for p in page.results], "total": page.total})
        return page

    def get_discover_feed(self, viewer, req: PageRequest) -> Page:
        qs = Post.objects.filter(is_public=True)
        return paginate_queryset(with_engagement(qs, viewer).order_by(*FEED_ORDERING), req)

    def _rehydrate(self, hit: dict, viewer, req: PageRequest) -> Page:
        ids: List[uuid.UUID] = [uuid.UUID(x) for x in hit.get("ids", [])]
        by_id = {p.id: p for p in with_engagement(Post.objects.filter(id__in=ids), viewer)}
        # TTL 사이에 삭제된 글은 건너뛴다
        results = [by_id[i] for i in ids if i in by_id]
        return Page(results=results, page=req.page, limit=req.limit, total=int(hit.get("total", len(results))))


# ---- 캐시 무효화 (common.events 시그널 수신) ----
def invalidate_for_follow_change(actor_id) -> None:
    cache = get_cache()
    if cache is None:
        return
    cache.bump_home_ver([uuid.UUID(str(actor_id))])


def invalidate_for_post_change(author_id) -> None:
    cache = get_cache()
    if cache is None:
        return
    author_id = uuid.UUID(str(author_id))
    followers = FollowGraph().follower_ids(author_id)
    cache.bump_home_ver([author_id, *followers])
    log.debug("Home feed versions bumped for %s and %d followers", author_id, len(followers))
