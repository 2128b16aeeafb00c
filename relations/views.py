from django.conf import settings
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import page_from_query_params, page_payload
from common.schema import ErrorOut, FollowStateOut
from users.serializers import UserPageOut, UserRefOut

from .services import FollowGraph

_TARGET = OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.STR, description="대상 사용자 ID(UUID) 또는 username")
_PAGE_PARAMS = [
    OpenApiParameter(name="page", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1부터 시작"),
    OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1..100 (기본 20)"),
]


def _follow_default_limit() -> int:
    return int(getattr(settings, "PAGINATION", {}).get("FOLLOW_DEFAULT_LIMIT", 20))


class UserRelationViewSet(viewsets.ViewSet):
    """
    /api/v1/users/{pk}/follow      (POST: follow, DELETE: unfollow)
    /api/v1/users/{pk}/followers   (GET)
    /api/v1/users/{pk}/following   (GET)
    """

    permission_classes = [IsAuthenticated]
    lookup_field = "pk"  # URL의 {pk}는 대상 사용자 id 또는 username
    serializer_class = serializers.Serializer

    def _graph(self) -> FollowGraph:
        return FollowGraph()

    @extend_schema(
        tags=["Relations"],
        summary="사용자 팔로우",
        operation_id="users_follow",
        parameters=[_TARGET],
        request=None,
        responses={
            200: OpenApiResponse(response=FollowStateOut, description="팔로우 성공"),
            400: OpenApiResponse(response=ErrorOut, description="자기 자신 팔로우(self_follow) 또는 이미 팔로우 중(already_following)"),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut, description="대상 사용자가 없음"),
            409: OpenApiResponse(response=ErrorOut, description="동시 요청 충돌, 재시도 필요"),
        },
        examples=[OpenApiExample("응답 예시", value={"following": True, "changed": True}, response_only=True)],
    )
    @action(detail=True, methods=["post"], url_path="follow")
    def follow(self, request, pk=None):
        result = self._graph().follow(request.user, pk)
        return Response({"following": result.following, "changed": result.changed}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Relations"],
        summary="사용자 언팔로우",
        description="팔로우 관계가 없으면 아무 것도 하지 않고 `changed=false` 로 응답합니다.",
        operation_id="users_unfollow",
        parameters=[_TARGET],
        request=None,
        responses={
            200: OpenApiResponse(response=FollowStateOut, description="언팔로우 결과"),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut, description="대상 사용자가 없음"),
        },
    )
    @follow.mapping.delete
    def unfollow(self, request, pk=None):
        result = self._graph().unfollow(request.user, pk)
        return Response({"following": result.following, "changed": result.changed}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Relations"],
        summary="팔로워 목록",
        description="대상 사용자를 팔로우하는 사용자들을 팔로우 시각 최신순으로 반환합니다.",
        operation_id="users_followers",
        parameters=[_TARGET, *_PAGE_PARAMS],
        responses={200: OpenApiResponse(response=UserPageOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=True, methods=["get"], url_path="followers")
    def followers(self, request, pk=None):
        req = page_from_query_params(request.query_params, default=_follow_default_limit())
        page = self._graph().list_followers(pk, req)
        return Response(page_payload(page, UserRefOut))

    @extend_schema(
        tags=["Relations"],
        summary="팔로잉 목록",
        description="대상 사용자가 팔로우하는 사용자들을 팔로우 시각 최신순으로 반환합니다.",
        operation_id="users_following",
        parameters=[_TARGET, *_PAGE_PARAMS],
        responses={200: OpenApiResponse(response=UserPageOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=True, methods=["get"], url_path="following")
    def following(self, request, pk=None):
        req = page_from_query_params(request.query_params, default=_follow_default_limit())
        page = self._graph().list_following(pk, req)
        return Response(page_payload(page, UserRefOut))
