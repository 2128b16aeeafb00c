from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .groups import user_notify_group


class NotificationConsumer(AsyncJsonWebsocketConsumer):
    """
    /ws/notifications/ 에 접속한 사용자에게 인앱 알림을 실시간으로 전달한다.

    서버 → 클라이언트 프레임:
        {"event": "notification", "data": {"id", "type": "follow"|"like"|"comment", "payload": {"actor_id", "post_id"?, "comment_id"?, "timestamp"}, "is_read", "created_at"}}
        {"event": "pong"}
    클라이언트 → 서버: {"type": "ping"}

    notifications.tasks.push_to_user 가 저장된 Notification 을 그룹 notify.<user_id> 로 보낸다:
        {"type": "notify.message", "payload": NotificationOut(notification).data}
    """

    async def connect(self):
        self.user_id = self.scope.get("user_id")
        if not self.user_id:
            await self.close(code=4401)  # 토큰 없음/검증 실패
            return

        self.group_name = user_notify_group(self.user_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive_json(self, content, **kwargs):
        if isinstance(content, dict) and content.get("type") == "ping":
            await self.send_json({"event": "pong"})

    async def notify_message(self, event):
        await self.send_json({"event": "notification", "data": event.get("payload") or {}})
