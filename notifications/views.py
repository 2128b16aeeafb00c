from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import page_from_query_params, page_payload, paginate_queryset
from common.schema import ErrorOut, UpdatedOut

from .models import Notification
from .serializers import MarkReadIn, NotificationOut, NotificationPageOut


class NotificationViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationOut

    def get_queryset(self):
        qs = Notification.objects.filter(user=self.request.user).order_by("-created_at", "-id")
        if self.request.query_params.get("unread") == "true":
            qs = qs.filter(is_read=False)
        return qs

    @extend_schema(
        tags=["Notifications"],
        summary="내 알림 목록",
        description=("현재 사용자에게 전달된 알림(follow/like/comment)을 최신순으로 반환합니다.\n" "- `unread=true` 이면 읽지 않은 알림만"),
        operation_id="notifications_list",
        parameters=[
            OpenApiParameter(name="unread", location=OpenApiParameter.QUERY, required=False, type=OpenApiTypes.STR, enum=["true", "false"], description="읽지 않은 것만"),
            OpenApiParameter(name="page", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1부터 시작"),
            OpenApiParameter(name="limit", location=OpenApiParameter.QUERY, type=OpenApiTypes.INT, required=False, description="1..100 (기본 10)"),
        ],
        responses={200: OpenApiResponse(response=NotificationPageOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    def list(self, request):
        page = paginate_queryset(self.get_queryset(), page_from_query_params(request.query_params))
        return Response(page_payload(page, NotificationOut))

    @extend_schema(
        tags=["Notifications"],
        summary="알림 읽음 처리",
        description="요청한 알림 ID 목록을 읽음 처리합니다. 사용자 본인 소유의 알림만 처리됩니다.",
        operation_id="notifications_mark_read",
        request=MarkReadIn,
        responses={200: OpenApiResponse(response=UpdatedOut), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        examples=[
            OpenApiExample("요청 예시", value={"ids": ["11111111-1111-1111-1111-111111111111"]}, request_only=True),
            OpenApiExample("응답 예시", value={"updated": 1}, response_only=True),
        ],
    )
    @action(detail=False, methods=["POST"], url_path="mark-read")
    def mark_read(self, request):
        ser = MarkReadIn(data=request.data)
        ser.is_valid(raise_exception=True)
        updated = Notification.objects.filter(user=request.user, id__in=ser.validated_data["ids"]).update(is_read=True)
        return Response({"updated": updated})

    @extend_schema(
        tags=["Notifications"],
        summary="모든 알림 읽음 처리",
        operation_id="notifications_mark_all_read",
        request=None,
        responses={200: OpenApiResponse(response=UpdatedOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    @action(detail=False, methods=["POST"], url_path="mark-all-read", serializer_class=serializers.Serializer)
    def mark_all_read(self, request):
        updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
        return Response({"updated": updated})
