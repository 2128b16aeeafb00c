import logging
import uuid
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from common.events import emit_comment_added, emit_post_liked
from common.exceptions import ForbiddenError, NotFoundError

from .models import Comment, Post, PostLike
from .services import load_post
from .validators import validate_comment_content

log = logging.getLogger(__name__)

User = get_user_model()


@dataclass(frozen=True)
class LikeResult:
    liked: bool
    like_count: int


@dataclass(frozen=True)
class CommentResult:
    comment: Comment
    comment_count: int


class EngagementEngine:
    """
    좋아요/댓글 규칙.
    - 비공개 게시글은 작성자만 좋아요/댓글 가능(그 외 ForbiddenError)
    - 좋아요는 토글: 호출마다 정확히 한 번 상태가 뒤집힌다
    - 댓글 삭제는 댓글 작성자 또는 게시글 작성자만
    """

    @staticmethod
    def _ensure_engageable(post: Post, user: User) -> None:
        if not post.is_public and post.author_id != user.id:
            raise ForbiddenError("Private posts can only be engaged by their author.")

    def toggle_like(self, post_id, user) -> LikeResult:
        added = False
        with transaction.atomic():
            # 게시글 행 잠금으로 같은 게시글에 대한 토글을 직렬화
            post = load_post(post_id, lock=True)
            self._ensure_engageable(post, user)

            deleted, _ = PostLike.objects.filter(post_id=post.id, user_id=user.id).delete()
            if deleted:
                liked = False
            else:
                try:
                    with transaction.atomic():
                        PostLike.objects.create(post_id=post.id, user_id=user.id)
                    added = True
                except IntegrityError:
                    # 동시 요청이 먼저 같은 좋아요를 넣었다: 이미 좋아요 상태
                    log.info("Like race lost on post %s by %s", post.id, user.id)
                liked = True
            like_count = PostLike.objects.filter(post_id=post.id).count()

        if added:
            emit_post_liked(user.id, post.author_id, post.id)
        return LikeResult(liked=liked, like_count=like_count)

    def add_comment(self, post_id, user, content) -> CommentResult:
        text = validate_comment_content(content)
        with transaction.atomic():
            post = load_post(post_id)
            self._ensure_engageable(post, user)
            comment = Comment.objects.create(post=post, author=user, content=text)
            comment_count = Comment.objects.filter(post_id=post.id).count()

        emit_comment_added(user.id, post.author_id, post.id, comment.id)
        return CommentResult(comment=comment, comment_count=comment_count)

    def delete_comment(self, post_id, comment_id, requester) -> int:
        with transaction.atomic():
            post = load_post(post_id)
            # 다른 게시글의 댓글 id 도 "없음"으로 취급
            comment = Comment.objects.filter(pk=_comment_pk(comment_id), post_id=post.id).first()
            if comment is None:
                raise NotFoundError("Comment not found.")
            if requester.id not in (comment.author_id, post.author_id):
                raise ForbiddenError("Only the comment author or the post author can delete this comment.")
            comment.delete()
            return Comment.objects.filter(post_id=post.id).count()


def _comment_pk(comment_id):
    try:
        return uuid.UUID(str(comment_id))
    except (TypeError, ValueError):
        raise NotFoundError("Comment not found.")
