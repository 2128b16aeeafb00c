import logging
from dataclasses import dataclass
from typing import List

from django.db import IntegrityError, transaction

from common.events import emit_user_followed, emit_user_unfollowed
from common.exceptions import AlreadyFollowingError, ConflictError, SelfFollowError
from common.pagination import Page, PageRequest, paginate_queryset
from users.services import resolve_user

from .models import Follow

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationResult:
    following: bool
    changed: bool = True  # 실제 DB 변화가 있었는지


class FollowGraph:
    """
    팔로우 간선의 규칙을 한 곳에서 강제.
    - 대상이 존재하지 않으면 NotFoundError
    - 자기 자신 팔로우 금지(SelfFollowError)
    - 이미 팔로우 중이면 AlreadyFollowingError, 동시 요청으로 unique 제약에 걸리면 ConflictError
    - 언팔로우는 간선이 없으면 no-op
    """

    def __init__(self, resolve=resolve_user):
        self._resolve = resolve

    def follow(self, follower, followee_id) -> RelationResult:
        followee = self._resolve(followee_id)
        if follower.id == followee.id:
            raise SelfFollowError()
        if self.is_following(follower.id, followee.id):
            raise AlreadyFollowingError()
        try:
            with transaction.atomic():
                Follow.objects.create(follower=follower, following=followee)
        except IntegrityError:
            # 같은 간선을 동시에 만든 다른 요청이 먼저 커밋한 경우
            log.info("Follow race lost: %s -> %s", follower.id, followee.id)
            raise ConflictError()
        emit_user_followed(follower.id, followee.id)
        return RelationResult(following=True, changed=True)

    def unfollow(self, follower, followee_id) -> RelationResult:
        followee = self._resolve(followee_id)
        with transaction.atomic():
            deleted, _ = Follow.objects.filter(follower_id=follower.id, following_id=followee.id).delete()
        if not deleted:
            return RelationResult(following=False, changed=False)
        emit_user_unfollowed(follower.id, followee.id)
        return RelationResult(following=False, changed=True)

    def is_following(self, follower_id, followee_id) -> bool:
        return Follow.objects.filter(follower_id=follower_id, following_id=followee_id).exists()

    def following_ids(self, user_id) -> List:
        return list(Follow.objects.filter(follower_id=user_id).values_list("following_id", flat=True))

    def follower_ids(self, user_id) -> List:
        return list(Follow.objects.filter(following_id=user_id).values_list("follower_id", flat=True))

    def list_followers(self, user_id, req: PageRequest) -> Page:
        user = self._resolve(user_id)
        qs = Follow.objects.filter(following_id=user.id).select_related("follower").order_by("-created_at", "-id")
        page = paginate_queryset(qs, req)
        page.results = [edge.follower for edge in page.results]
        return page

    def list_following(self, user_id, req: PageRequest) -> Page:
        user = self._resolve(user_id)
        qs = Follow.objects.filter(follower_id=user.id).select_related("following").order_by("-created_at", "-id")
        page = paginate_queryset(qs, req)
        page.results = [edge.following for edge in page.results]
        return page
