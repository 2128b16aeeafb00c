import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from notifications import tasks
from notifications.models import Notification
from notifications.tasks import celery_emitter, deliver_event

pytestmark = pytest.mark.django_db
User = get_user_model()


# ---------- Fixtures ----------
@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def users():
    a = User.objects.create_user(username="alice")
    b = User.objects.create_user(username="bob")
    return a, b


@pytest.fixture
def pushed(monkeypatch):
    # 채널 레이어 대신 푸시 내역을 기록
    calls = []
    monkeypatch.setattr(tasks, "push_to_user", lambda user_id, data: calls.append((user_id, data)))
    return calls


# =======================
# Delivery task
# =======================
class TestDeliverEvent:
    def test_like_creates_notification_and_pushes(self, users, pushed):
        a, b = users
        payload = {"actor_id": str(a.id), "target_user_id": str(b.id), "post_id": "p-1", "timestamp": "2024-01-01T00:00:00+00:00"}

        notif_id = deliver_event(event="PostLiked", payload=payload)

        n = Notification.objects.get(id=notif_id)
        assert n.user_id == b.id
        assert n.type == Notification.Type.LIKE
        assert n.payload == {"actor_id": str(a.id), "post_id": "p-1", "timestamp": "2024-01-01T00:00:00+00:00"}
        assert pushed[0][0] == str(b.id)
        assert pushed[0][1]["type"] == "like"

    def test_push_failure_retries_push_only(self, users, monkeypatch):
        a, b = users
        queued = []
        monkeypatch.setattr(tasks.push_notification, "delay", lambda *args: queued.append(args))

        def _layer_down(user_id, data):
            raise ConnectionError("channel layer unreachable")

        monkeypatch.setattr(tasks, "push_to_user", _layer_down)
        notif_id = deliver_event(event="PostLiked", payload={"actor_id": str(a.id), "target_user_id": str(b.id), "post_id": "p-1"})
        assert queued == [(str(b.id), notif_id)]

        # 푸시 실패 후 재시도해도 알림 행은 하나뿐
        with pytest.raises(ConnectionError):
            tasks.push_notification.run(*queued[0])
        pushed = []
        monkeypatch.setattr(tasks, "push_to_user", lambda user_id, data: pushed.append(data))
        assert tasks.push_notification.run(*queued[0]) is True

        assert Notification.objects.filter(user=b).count() == 1
        assert pushed[0]["id"] == notif_id

    def test_self_action_is_skipped(self, users, pushed):
        a, _ = users
        assert deliver_event(event="CommentAdded", payload={"actor_id": str(a.id), "target_user_id": str(a.id)}) is None
        assert Notification.objects.count() == 0
        assert pushed == []

    def test_non_notification_event_ignored(self, users, pushed):
        a, b = users
        assert deliver_event(event="UserUnfollowed", payload={"actor_id": str(a.id), "target_user_id": str(b.id)}) is None
        assert Notification.objects.count() == 0

    def test_celery_emitter_runs_task_eagerly(self, users, pushed):
        a, b = users
        celery_emitter("UserFollowed", {"actor_id": str(a.id), "target_user_id": str(b.id), "timestamp": "t"})
        assert Notification.objects.filter(user=b, type=Notification.Type.FOLLOW).count() == 1

    def test_end_to_end_follow_like_comment(self, client, users, pushed):
        a, b = users
        client.force_authenticate(b)
        post = client.post("/api/v1/posts/", {"content": "leg day"}, format="json").json()

        client.force_authenticate(a)
        client.post(f"/api/v1/users/{b.id}/follow", format="json")
        client.post(f"/api/v1/posts/{post['id']}/like/")
        client.post(f"/api/v1/posts/{post['id']}/comments/", {"content": "strong!"}, format="json")

        types = sorted(Notification.objects.filter(user=b).values_list("type", flat=True))
        assert types == ["comment", "follow", "like"]
        assert Notification.objects.filter(user=a).count() == 0

    def test_emitter_failure_does_not_break_request(self, client, users, monkeypatch):
        a, b = users

        def _boom(event, payload):
            raise RuntimeError("broker down")

        monkeypatch.setattr(tasks, "celery_emitter", _boom)
        client.force_authenticate(a)
        res = client.post(f"/api/v1/users/{b.id}/follow", format="json")
        assert res.status_code == 200

    def test_logging_emitter_fallback(self, client, users, settings, caplog):
        a, b = users
        settings.DOMAIN_EVENT_EMITTER = ""
        client.force_authenticate(a)
        with caplog.at_level("INFO", logger="common.events"):
            assert client.post(f"/api/v1/users/{b.id}/follow", format="json").status_code == 200
        assert "UserFollowed" in caplog.text
        assert Notification.objects.count() == 0


# =======================
# Notifications API
# =======================
class TestNotificationsAPI:
    def _make(self, user, n, **kw):
        return [Notification.objects.create(user=user, type="like", payload={"i": i}, **kw) for i in range(n)]

    def test_list_mine_newest_first_and_unread_filter(self, client, users):
        a, b = users
        self._make(a, 2)
        self._make(a, 1, is_read=True)
        self._make(b, 3)
        client.force_authenticate(a)

        r = client.get("/api/v1/notifications/")
        assert r.status_code == 200
        assert r.json()["total"] == 3

        r2 = client.get("/api/v1/notifications/?unread=true")
        assert r2.json()["total"] == 2
        assert all(x["is_read"] is False for x in r2.json()["results"])

    def test_mark_read_only_mine(self, client, users):
        a, b = users
        mine = self._make(a, 2)
        theirs = self._make(b, 1)
        client.force_authenticate(a)

        r = client.post("/api/v1/notifications/mark-read/", {"ids": [str(mine[0].id), str(theirs[0].id)]}, format="json")
        assert r.status_code == 200
        assert r.json() == {"updated": 1}
        theirs[0].refresh_from_db()
        assert theirs[0].is_read is False

    def test_mark_read_requires_ids(self, client, users):
        a, _ = users
        client.force_authenticate(a)
        r = client.post("/api/v1/notifications/mark-read/", {"ids": []}, format="json")
        assert r.status_code == 400

    def test_mark_all_read(self, client, users):
        a, _ = users
        self._make(a, 3)
        client.force_authenticate(a)
        r = client.post("/api/v1/notifications/mark-all-read/")
        assert r.json() == {"updated": 3}
        assert Notification.objects.filter(user=a, is_read=False).count() == 0

    def test_requires_auth(self, client):
        assert client.get("/api/v1/notifications/").status_code == 401
