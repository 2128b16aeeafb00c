from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.pagination import page_from_query_params, page_payload
from common.schema import ErrorOut
from posts.serializers import PostOut, PostPageOut

from .services import FeedAssembler

_PAGE_PARAMS = [
    OpenApiParameter(name="page", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1부터 시작하는 페이지 번호(기본=1)"),
    OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="페이지 당 개수(기본=10, 1..100으로 보정)"),
]


class FeedViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Feed"],
        summary="홈 피드 조회",
        description=(
            "내 게시물(공개/비공개)과 내가 팔로우하는 사용자들의 공개 게시물을 최신순으로 반환합니다.\n"
            "- 페이지네이션: `page`(1부터), `limit`(기본=10)\n"
            "- `has_more` 로 다음 페이지 존재 여부를 알려줍니다."
        ),
        operation_id="feed_home",
        parameters=_PAGE_PARAMS,
        responses={200: OpenApiResponse(response=PostPageOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("기본 조회", value=None, request_only=True, description="GET /api/v1/feed/home/?page=1&limit=10")],
    )
    @action(detail=False, methods=["GET"], url_path="home")
    def home(self, request):
        req = page_from_query_params(request.query_params)
        page = FeedAssembler().get_home_feed(request.user, req)
        return Response(page_payload(page, PostOut))

    @extend_schema(
        tags=["Feed"],
        summary="디스커버 피드 조회",
        description="전체 공개 게시물을 최신순으로 반환합니다. 비로그인 접근 가능하며, 로그인 시 `liked_by_viewer` 가 채워집니다.",
        operation_id="feed_discover",
        parameters=_PAGE_PARAMS,
        responses={200: OpenApiResponse(response=PostPageOut), 400: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["GET"], url_path="discover", permission_classes=[AllowAny])
    def discover(self, request):
        req = page_from_query_params(request.query_params)
        page = FeedAssembler().get_discover_feed(request.user, req)
        return Response(page_payload(page, PostOut))
