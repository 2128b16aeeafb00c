from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.schema import ErrorOut, LikeOut

from .engagements import EngagementEngine
from .serializers import CommentCreatedOut, CommentIn, CommentOut, PostCreateIn, PostOut, PostUpdateIn
from .services import PostStore

_POST_ID = OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="포스트 ID (UUID)")


@extend_schema_view(
    create=extend_schema(
        tags=["Posts"],
        summary="새 포스트 작성",
        description=(
            "텍스트 포스트를 생성합니다. 운동 기록(`workout_id`)과 이미지 URL 목록을 함께 첨부할 수 있습니다.\n"
            "- `content`: 공백 제거 후 1..1000자\n"
            "- `images`: 최대 10개, `http(s)://...(jpg|jpeg|png|gif|webp)` 형식\n"
            "- `is_public`: 기본 true"
        ),
        operation_id="posts_create",
        request=PostCreateIn,
        responses={201: OpenApiResponse(response=PostOut, description="생성된 포스트"), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("요청 예시", value={"content": "leg day", "images": ["https://cdn.example.com/squat.jpg"], "is_public": True}, request_only=True)],
    ),
    retrieve=extend_schema(
        tags=["Posts"],
        summary="포스트 단건 조회",
        description="비공개 포스트는 작성자만 조회할 수 있습니다(그 외 403).",
        operation_id="posts_retrieve",
        parameters=[_POST_ID],
        responses={200: OpenApiResponse(response=PostOut), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
    partial_update=extend_schema(
        tags=["Posts"],
        summary="포스트 수정(부분)",
        description="`content`, `images`, `is_public` 만 수정할 수 있습니다. 다른 키는 400.",
        operation_id="posts_partial_update",
        parameters=[_POST_ID],
        request=PostUpdateIn,
        responses={
            200: OpenApiResponse(response=PostOut),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=ErrorOut, description="작성자가 아님"),
            404: OpenApiResponse(response=ErrorOut),
        },
    ),
    destroy=extend_schema(
        tags=["Posts"],
        summary="포스트 삭제",
        description="작성자만 삭제할 수 있으며 좋아요/댓글도 함께 삭제됩니다.",
        operation_id="posts_destroy",
        parameters=[_POST_ID],
        responses={204: OpenApiResponse(description="삭제 성공"), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    ),
)
class PostViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = PostOut

    def get_permissions(self):
        # 단건 조회는 비로그인 허용(공개 포스트)
        if self.action == "retrieve":
            return [AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == "create":
            return PostCreateIn
        if self.action == "partial_update":
            return PostUpdateIn
        if self.action == "comments":
            return CommentIn
        return PostOut

    def _store(self) -> PostStore:
        return PostStore()

    def _engine(self) -> EngagementEngine:
        return EngagementEngine()

    def _out(self, post):
        return PostOut(post, context=self.get_serializer_context()).data

    def create(self, request):
        ser = PostCreateIn(data=request.data)
        ser.is_valid(raise_exception=True)
        v = ser.validated_data
        post = self._store().create_post(
            request.user,
            v["content"],
            workout_id=v.get("workout_id"),
            images=v.get("images") or [],
            is_public=v.get("is_public", True),
        )
        return Response(self._out(post), status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        post = self._store().get_post(pk, viewer=request.user)
        return Response(self._out(post))

    def partial_update(self, request, pk=None):
        # 허용되지 않은 키 검사는 PostStore 가 담당하므로 원본 키를 그대로 넘긴다
        patch = dict(request.data.items()) if hasattr(request.data, "items") else {}
        post = self._store().update_post(pk, request.user, patch)
        return Response(self._out(post))

    def destroy(self, request, pk=None):
        self._store().delete_post(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ================= 참여 액션 =================
    @extend_schema(
        tags=["Posts/Engagements"],
        summary="좋아요 토글",
        description="좋아요 상태를 뒤집습니다. 같은 사용자가 두 번 호출하면 원래 상태로 돌아옵니다.",
        operation_id="posts_like_toggle",
        parameters=[_POST_ID],
        request=None,
        responses={
            200: OpenApiResponse(response=LikeOut, description="토글 후 상태와 좋아요 수"),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=ErrorOut, description="다른 사람의 비공개 포스트"),
            404: OpenApiResponse(response=ErrorOut),
        },
        examples=[OpenApiExample("응답 예시", value={"liked": True, "like_count": 1}, response_only=True)],
    )
    @action(detail=True, methods=["post"], url_path="like")
    def like(self, request, pk=None):
        result = self._engine().toggle_like(pk, request.user)
        return Response({"liked": result.liked, "like_count": result.like_count})

    @extend_schema(
        tags=["Posts/Engagements"],
        summary="댓글 작성",
        description="공백 제거 후 1..500자.",
        operation_id="posts_comments_create",
        parameters=[_POST_ID],
        request=CommentIn,
        responses={
            201: OpenApiResponse(response=CommentCreatedOut),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=ErrorOut, description="다른 사람의 비공개 포스트"),
            404: OpenApiResponse(response=ErrorOut),
        },
        examples=[OpenApiExample("요청 예시", value={"content": "Nice PR!"}, request_only=True)],
    )
    @action(detail=True, methods=["post"], url_path="comments")
    def comments(self, request, pk=None):
        ser = CommentIn(data=request.data)
        ser.is_valid(raise_exception=True)
        result = self._engine().add_comment(pk, request.user, ser.validated_data["content"])
        body = {"comment": CommentOut(result.comment).data, "comment_count": result.comment_count}
        return Response(body, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Posts/Engagements"],
        summary="댓글 삭제",
        description="댓글 작성자 또는 포스트 작성자만 삭제할 수 있습니다.",
        operation_id="posts_comments_destroy",
        parameters=[_POST_ID, OpenApiParameter(name="comment_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="댓글 ID")],
        request=None,
        responses={204: OpenApiResponse(description="삭제 성공"), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=True, methods=["delete"], url_path=r"comments/(?P<comment_id>[^/.]+)")
    def delete_comment(self, request, pk=None, comment_id=None):
        self._engine().delete_comment(pk, comment_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
