import logging
from typing import Dict, Optional

from asgiref.sync import async_to_sync
from celery import shared_task
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from realtime.groups import user_notify_group

from .models import Notification
from .serializers import NotificationOut

log = logging.getLogger(__name__)

User = get_user_model()

# 알림으로 전달되는 이벤트만. 나머지(UserUnfollowed, Post*)는 캐시 무효화 용도
EVENT_TYPES = {
    "UserFollowed": Notification.Type.FOLLOW,
    "PostLiked": Notification.Type.LIKE,
    "CommentAdded": Notification.Type.COMMENT,
}
PAYLOAD_KEYS = ("actor_id", "post_id", "comment_id", "timestamp")


def celery_emitter(event: str, payload: Dict) -> None:
    # settings.DOMAIN_EVENT_EMITTER 기본값
    if event not in EVENT_TYPES:
        return
    deliver_event.delay(event, payload)


def push_to_user(user_id: str, data: Dict) -> None:
    layer = get_channel_layer()
    if layer is None:
        return
    async_to_sync(layer.group_send)(user_notify_group(user_id), {"type": "notify.message", "payload": data})


@shared_task(name="notifications.tasks.deliver_event", autoretry_for=(DatabaseError,), retry_backoff=2, max_retries=5)
def deliver_event(event: str, payload: Dict) -> Optional[str]:
    type_ = EVENT_TYPES.get(event)
    if type_ is None:
        return None

    target_id = str(payload.get("target_user_id") or "")
    actor_id = str(payload.get("actor_id") or "")
    # 자기 자신의 글에 좋아요/댓글 등은 알리지 않는다
    if not target_id or target_id == actor_id:
        return None
    if not User.objects.filter(id=target_id, is_active=True).exists():
        log.info("Skip %s notification: recipient %s is gone", event, target_id)
        return None

    # 1) 인앱 저장
    notif = Notification.objects.create(user_id=target_id, type=type_, payload={k: payload[k] for k in PAYLOAD_KEYS if k in payload})

    # 2) 실시간 푸시는 별도 태스크(재시도해도 알림 행은 하나)
    push_notification.delay(target_id, str(notif.id))
    return str(notif.id)


@shared_task(name="notifications.tasks.push_notification", autoretry_for=(Exception,), retry_backoff=2, max_retries=5)
def push_notification(user_id: str, notification_id: str) -> bool:
    # 접속 중인 소켓에만 전달. 그 사이 삭제된 알림은 건너뛴다
    notif = Notification.objects.filter(id=notification_id, user_id=user_id).first()
    if notif is None:
        return False
    push_to_user(user_id, NotificationOut(notif).data)
    return True
