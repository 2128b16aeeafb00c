from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, OuterRef
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.pagination import page_from_query_params, page_payload
from common.schema import ErrorOut
from posts.serializers import PostOut, PostPageOut
from posts.services import PostStore
from relations.models import Follow

from .serializers import UserCreateIn, UserDetailOut, UserPageOut, UserRefOut, UserUpdateIn
from .services import resolve_user, search_users

User = get_user_model()

_IDENTIFIER = OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.STR, description="사용자 ID(UUID) 또는 username")


class UserViewSet(viewsets.GenericViewSet):
    """
    /api/v1/users              (POST: 회원가입)
    /api/v1/users/me           (GET, PATCH)
    /api/v1/users/search       (GET: username/display_name 검색)
    /api/v1/users/{pk}         (GET: 공개 프로필)
    /api/v1/users/{pk}/posts   (GET: 작성 포스트 목록)
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserDetailOut

    def get_permissions(self):
        if self.action in ("create", "retrieve", "posts"):
            return [AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateIn
        if self.action == "partial_update_me":
            return UserUpdateIn
        return UserDetailOut

    def _detail(self, user_id):
        qs = User.objects.filter(id=user_id).annotate(
            follower_count=Count("followers", distinct=True),
            following_count=Count("following", distinct=True),
        )
        viewer = self.request.user
        if viewer and viewer.is_authenticated:
            qs = qs.annotate(is_following=Exists(Follow.objects.filter(follower_id=viewer.id, following_id=OuterRef("pk"))))
        return UserDetailOut(qs.get()).data

    @extend_schema(
        tags=["Users"],
        summary="회원가입",
        description="username 은 3..30자 영문/숫자/밑줄이며 가입 후 변경할 수 없습니다. 토큰은 `/api/v1/auth/token` 에서 발급합니다.",
        operation_id="users_create",
        request=UserCreateIn,
        responses={201: OpenApiResponse(response=UserDetailOut), 400: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("요청 예시", value={"username": "squat_queen", "password": "str0ngpass", "display_name": "Squat Queen"}, request_only=True)],
    )
    def create(self, request):
        ser = UserCreateIn(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        try:
            with transaction.atomic():
                user = User.objects.create_user(username=v["username"], password=v["password"], display_name=v.get("display_name", ""))
        except IntegrityError:
            # 중복 검사 이후 같은(대소문자 무시) 이름이 먼저 가입한 경우
            raise serializers.ValidationError({"username": ["Already taken username."]})
        return Response(self._detail(user.id), status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Users"],
        summary="공개 프로필 조회",
        operation_id="users_retrieve",
        parameters=[_IDENTIFIER],
        responses={200: OpenApiResponse(response=UserDetailOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    def retrieve(self, request, pk=None):
        user = resolve_user(pk)
        return Response(self._detail(user.id))

    @extend_schema(
        tags=["Users"],
        summary="내 프로필 조회",
        operation_id="users_me_get",
        responses={200: OpenApiResponse(response=UserDetailOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        return Response(self._detail(request.user.id))

    @extend_schema(
        tags=["Users"],
        summary="내 프로필 수정(부분)",
        description="`display_name` 만 수정할 수 있습니다. username 은 읽기 전용입니다.",
        operation_id="users_me_patch",
        request=UserUpdateIn,
        responses={200: OpenApiResponse(response=UserDetailOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("요청 예시", value={"display_name": "Deadlift Dan"}, request_only=True)],
    )
    @me.mapping.patch
    def partial_update_me(self, request):
        s = UserUpdateIn(request.user, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(self._detail(request.user.id))

    @extend_schema(
        tags=["Users"],
        summary="사용자 포스트 목록",
        description="본인이 조회하면 비공개 포스트까지, 그 외에는 공개 포스트만 최신순으로 반환합니다.",
        operation_id="users_posts",
        parameters=[
            _IDENTIFIER,
            OpenApiParameter(name="page", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1부터 시작"),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1..100 (기본 10)"),
        ],
        responses={200: OpenApiResponse(response=PostPageOut), 400: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=True, methods=["get"], url_path="posts")
    def posts(self, request, pk=None):
        req = page_from_query_params(request.query_params)
        page = PostStore().get_user_posts(pk, request.user, req)
        return Response(page_payload(page, PostOut))

    @extend_schema(
        tags=["Users"],
        summary="사용자 검색",
        description="username 또는 display_name 에 `q` 가 포함된(대소문자 무시) 사용자를 username 순으로 반환합니다.",
        operation_id="users_search",
        parameters=[
            OpenApiParameter(name="q", location=OpenApiParameter.QUERY, type=OpenApiTypes.STR, required=True, description="검색어"),
            OpenApiParameter(name="page", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1부터 시작"),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1..100 (기본 10)"),
        ],
        responses={200: OpenApiResponse(response=UserPageOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        req = page_from_query_params(request.query_params)
        page = search_users(request.query_params.get("q"), req)
        return Response(page_payload(page, UserRefOut))
