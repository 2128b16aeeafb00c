from drf_spectacular.utils import inline_serializer
from rest_framework import serializers

# Common
ErrorOut = inline_serializer(
    name="ErrorOut",
    fields={
        "detail": serializers.CharField(help_text="Human readable error message."),
        "code": serializers.CharField(help_text="Stable error kind (validation_error, not_found, forbidden, ...)."),
        "errors": serializers.DictField(required=False, help_text="필드별 오류(입력 검증 실패 시)"),
    },
)


# Pagination (앱별 *PageOut 이 상속하고 results 만 추가)
class PageMetaOut(serializers.Serializer):
    page = serializers.IntegerField(help_text="1부터 시작")
    limit = serializers.IntegerField(help_text="1..100 범위로 보정됨")
    total = serializers.IntegerField()
    has_more = serializers.BooleanField(help_text="page * limit < total")


# Relations
FollowStateOut = inline_serializer(
    name="FollowStateOut",
    fields={
        "following": serializers.BooleanField(),
        "changed": serializers.BooleanField(help_text="이번 요청으로 상태가 바뀌었는지"),
    },
)

# Engagements
LikeOut = inline_serializer(
    name="LikeOut",
    fields={
        "liked": serializers.BooleanField(),
        "like_count": serializers.IntegerField(),
    },
)

# Notifications
UpdatedOut = inline_serializer(
    name="UpdatedOut",
    fields={"updated": serializers.IntegerField()},
)
