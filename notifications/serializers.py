from rest_framework import serializers

from common.schema import PageMetaOut

from .models import Notification


class NotificationOut(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ("id", "type", "payload", "is_read", "created_at")


class NotificationPageOut(PageMetaOut):
    results = NotificationOut(many=True)


class MarkReadIn(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
