from rest_framework import serializers

from common.schema import PageMetaOut
from users.serializers import UserRefOut
from workouts.serializers import WorkoutSummaryOut


class PostCreateIn(serializers.Serializer):
    # 길이/공백/URL 패턴 검증은 도메인(PostStore)에서 통일된 문구로 수행
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    workout_id = serializers.UUIDField(required=False, allow_null=True)
    images = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)
    is_public = serializers.BooleanField(required=False, default=True)


class PostUpdateIn(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    images = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)
    is_public = serializers.BooleanField(required=False)


class CommentIn(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)


class CommentOut(serializers.Serializer):
    id = serializers.UUIDField()
    author = UserRefOut()
    content = serializers.CharField()
    created_at = serializers.DateTimeField()


class CommentCreatedOut(serializers.Serializer):
    comment = CommentOut()
    comment_count = serializers.IntegerField()


class PostOut(serializers.Serializer):
    """with_engagement() 로 집계/연관 데이터를 붙인 Post 를 직렬화한다."""

    id = serializers.UUIDField()
    author = UserRefOut()
    content = serializers.CharField()
    workout = WorkoutSummaryOut(allow_null=True)
    images = serializers.ListField(child=serializers.CharField())
    is_public = serializers.BooleanField()
    like_count = serializers.IntegerField(default=0)
    comment_count = serializers.IntegerField(default=0)
    liked_by_viewer = serializers.BooleanField(default=False)
    comments = CommentOut(many=True, source="comments.all")
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class PostPageOut(PageMetaOut):
    results = PostOut(many=True)
