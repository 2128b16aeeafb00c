import uuid

from django.conf import settings
from django.db import models


class Post(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts", db_index=True)
    content = models.TextField()
    workout = models.ForeignKey("workouts.Workout", on_delete=models.SET_NULL, null=True, blank=True, related_name="posts")
    images = models.JSONField(default=list, blank=True)  # 이미지 URL 목록(순서 유지)
    is_public = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "posts"
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["author", "-created_at"], name="idx_post_author_created"),
            models.Index(fields=["is_public", "-created_at"], name="idx_post_public_created"),
        ]

    def __str__(self):
        return f"Post<{self.id}> by {self.author_id}"


class PostLike(models.Model):
    # like_count 는 저장하지 않는다. 항상 이 테이블의 행 수로 계산
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="likes")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="post_likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "post_likes"
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="uniq_post_like_user"),
        ]
        indexes = [
            models.Index(fields=["post", "user"], name="idx_post_like_post_user"),
        ]


class Comment(models.Model):
    # 게시글에 종속. 게시글 삭제 시 함께 삭제된다.
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey("posts.Post", on_delete=models.CASCADE, related_name="comments", db_index=True)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments")
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "comments"
        ordering = ("created_at", "id")
        indexes = [
            models.Index(fields=["post", "created_at"], name="idx_comment_post_created"),
        ]

    def __str__(self):
        return f"Comment<{self.id}> on {self.post_id}"
