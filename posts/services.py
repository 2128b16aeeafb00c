from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional, Sequence

from django.db import transaction
from django.db.models import BooleanField, Count, Exists, OuterRef, Prefetch, Value

from common.events import emit_post_changed
from common.exceptions import ForbiddenError, NotFoundError, ValidationError
from common.pagination import Page, PageRequest, paginate_queryset
from users.services import resolve_user
from workouts.services import workout_exists

from .models import Comment, Post, PostLike
from .validators import validate_images, validate_post_content

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("content", "images", "is_public")
FEED_ORDERING = ("-created_at", "-id")  # 최신순, 같은 시각이면 id 역순


def viewer_id_of(viewer) -> Optional[uuid.UUID]:
    if viewer is None or not getattr(viewer, "is_authenticated", False):
        return None
    return viewer.id


def with_engagement(qs, viewer=None):
    """
    응답용 부가 정보를 붙인다.
    - like_count / comment_count: 저장하지 않고 매번 집계
    - liked_by_viewer: 비인증이면 항상 False
    - 작성자, 운동 요약, 댓글(오래된 순)
    """
    viewer_id = viewer_id_of(viewer)
    if viewer_id:
        liked = Exists(PostLike.objects.filter(post_id=OuterRef("pk"), user_id=viewer_id))
    else:
        liked = Value(False, output_field=BooleanField())
    return (
        qs.select_related("author", "workout")
        .annotate(like_count=Count("likes", distinct=True), comment_count=Count("comments", distinct=True), liked_by_viewer=liked)
        .prefetch_related(Prefetch("comments", queryset=Comment.objects.select_related("author").order_by("created_at", "id")))
    )


def parse_post_id(post_id) -> uuid.UUID:
    try:
        return post_id if isinstance(post_id, uuid.UUID) else uuid.UUID(str(post_id))
    except (TypeError, ValueError):
        raise NotFoundError("Post not found.")


def load_post(post_id, *, lock: bool = False) -> Post:
    qs = Post.objects.select_for_update() if lock else Post.objects.all()
    post = qs.filter(pk=parse_post_id(post_id)).first()
    if post is None:
        raise NotFoundError("Post not found.")
    return post


class PostStore:
    """게시글 생성/조회/수정/삭제. 모든 입력 검증은 쓰기 전에 끝난다."""

    def __init__(self, resolve=resolve_user, workout_lookup=workout_exists):
        self._resolve = resolve
        self._workout_exists = workout_lookup

    def _hydrated(self, post_id, viewer=None) -> Post:
        post = with_engagement(Post.objects.filter(pk=parse_post_id(post_id)), viewer).first()
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    def create_post(self, author, content: Any, workout_id=None, images: Sequence[str] = (), is_public: bool = True) -> Post:
        text = validate_post_content(content)
        urls = validate_images(images)
        if not isinstance(is_public, bool):
            raise ValidationError("is_public must be a boolean.")
        if workout_id is not None and not self._workout_exists(workout_id):
            raise ValidationError("Referenced workout does not exist.")

        with transaction.atomic():
            post = Post.objects.create(author=author, content=text, workout_id=workout_id, images=urls, is_public=is_public)
        log.info("Post created %s by %s", post.id, author.id)
        emit_post_changed("PostCreated", author.id, post.id)
        return self._hydrated(post.id, author)

    def get_post(self, post_id, viewer=None) -> Post:
        post = self._hydrated(post_id, viewer)
        if not post.is_public and post.author_id != viewer_id_of(viewer):
            raise ForbiddenError("This post is private.")
        return post

    def update_post(self, post_id, editor, patch: Mapping[str, Any]) -> Post:
        unknown = sorted(set(patch) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields not editable: {', '.join(unknown)}.")

        with transaction.atomic():
            post = load_post(post_id, lock=True)
            if post.author_id != editor.id:
                raise ForbiddenError("Only the author can edit this post.")

            fields = []
            if "content" in patch:
                post.content = validate_post_content(patch["content"])
                fields.append("content")
            if "images" in patch:
                post.images = validate_images(patch["images"])
                fields.append("images")
            if "is_public" in patch:
                if not isinstance(patch["is_public"], bool):
                    raise ValidationError("is_public must be a boolean.")
                post.is_public = patch["is_public"]
                fields.append("is_public")
            if fields:
                post.save(update_fields=[*fields, "updated_at"])

        if fields:
            emit_post_changed("PostUpdated", editor.id, post.id)
        return self._hydrated(post.id, editor)

    def delete_post(self, post_id, requester) -> None:
        with transaction.atomic():
            post = load_post(post_id, lock=True)
            if post.author_id != requester.id:
                raise ForbiddenError("Only the author can delete this post.")
            deleted_id = post.id
            post.delete()  # 좋아요/댓글은 CASCADE
        log.info("Post deleted %s by %s", deleted_id, requester.id)
        emit_post_changed("PostDeleted", requester.id, deleted_id)

    def get_user_posts(self, author_id, viewer, req: PageRequest) -> Page:
        author = self._resolve(author_id)
        qs = Post.objects.filter(author_id=author.id)
        if viewer_id_of(viewer) != author.id:
            qs = qs.filter(is_public=True)
        return paginate_queryset(with_engagement(qs, viewer).order_by(*FEED_ORDERING), req)
