from rest_framework import serializers

from common.schema import PageMetaOut

from .models import USERNAME_MAX, USERNAME_MIN, User, username_validator


class UserRefOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "display_name")
        read_only_fields = fields


class UserDetailOut(serializers.ModelSerializer):
    follower_count = serializers.IntegerField(read_only=True, default=0)
    following_count = serializers.IntegerField(read_only=True, default=0)
    # 비인증 조회 시에는 항상 false
    is_following = serializers.BooleanField(read_only=True, default=False)

    class Meta:
        model = User
        fields = ("id", "username", "display_name", "created_at", "follower_count", "following_count", "is_following")
        read_only_fields = fields


# /users/me, /users/search 경로와 겹치는 이름
RESERVED_USERNAMES = ("me", "search")


class UserCreateIn(serializers.Serializer):
    username = serializers.CharField(min_length=USERNAME_MIN, max_length=USERNAME_MAX, validators=[username_validator])
    password = serializers.CharField(write_only=True, min_length=8, max_length=128)
    display_name = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")

    def validate_username(self, value: str) -> str:
        value = value.strip()
        if value.lower() in RESERVED_USERNAMES:
            raise serializers.ValidationError("This username is reserved.")
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Already taken username.")
        return value


class UserUpdateIn(serializers.ModelSerializer):
    # username 은 읽기 전용. display_name 만 수정 가능
    class Meta:
        model = User
        fields = ("display_name",)
        extra_kwargs = {"display_name": {"allow_blank": True, "max_length": 100}}


class UserPageOut(PageMetaOut):
    results = UserRefOut(many=True)
