import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.dispatch import Signal
from django.utils import timezone
from django.utils.module_loading import import_string

log = logging.getLogger(__name__)

# ---- Domain signals ----
post_liked = Signal()  # kwargs: actor_id, target_user_id, post_id, timestamp
comment_added = Signal()  # kwargs: actor_id, target_user_id, post_id, comment_id, timestamp
user_followed = Signal()  # kwargs: actor_id, target_user_id, timestamp
user_unfollowed = Signal()  # kwargs: actor_id, target_user_id, timestamp
post_created = Signal()  # kwargs: actor_id, target_user_id, post_id, timestamp
post_updated = Signal()
post_deleted = Signal()

_SIGNALS = {
    "PostLiked": post_liked,
    "CommentAdded": comment_added,
    "UserFollowed": user_followed,
    "UserUnfollowed": user_unfollowed,
    "PostCreated": post_created,
    "PostUpdated": post_updated,
    "PostDeleted": post_deleted,
}


# ---- Pluggable emitter (out-of-process delivery) ----
def _get_emitter():
    path = getattr(settings, "DOMAIN_EVENT_EMITTER", None)
    if not path:
        return logging_emitter
    try:
        return import_string(path)
    except ImportError:
        log.exception("Failed to import emitter '%s'; fallback to logging.", path)
        return logging_emitter


def logging_emitter(event: str, payload: Dict[str, Any]) -> None:
    log.info("EVENT %s %s", event, payload)


def emit(event: str, payload: Dict[str, Any]) -> None:
    # 1) in-process signal (캐시 무효화 등 로컬 구독자)
    sig = _SIGNALS.get(event)
    if sig:
        # 수신자 실패(캐시 장애 등)는 이미 커밋된 요청을 실패시키지 않는다
        for receiver, result in sig.send_robust(sender="fitsocial", **payload):
            if isinstance(result, Exception):
                log.error("Receiver %s failed for %s", getattr(receiver, "__name__", receiver), event, exc_info=result)

    # 2) out-of-process emitter (Celery → 알림 전달). 실패해도 요청은 성공으로 끝난다.
    try:
        _get_emitter()(event, payload)
    except Exception:
        log.exception("Emitter failed for %s", event)


def _payload(actor_id, target_user_id, **extra) -> Dict[str, Any]:
    data = {"actor_id": str(actor_id), "target_user_id": str(target_user_id), "timestamp": timezone.now().isoformat()}
    for key, value in extra.items():
        if value is not None:
            data[key] = str(value)
    return data


# ---- Convenience helpers ----
def emit_post_liked(actor_id, author_id, post_id):
    emit("PostLiked", _payload(actor_id, author_id, post_id=post_id))


def emit_comment_added(actor_id, author_id, post_id, comment_id):
    emit("CommentAdded", _payload(actor_id, author_id, post_id=post_id, comment_id=comment_id))


def emit_user_followed(follower_id, following_id):
    emit("UserFollowed", _payload(follower_id, following_id))


def emit_user_unfollowed(follower_id, following_id):
    emit("UserUnfollowed", _payload(follower_id, following_id))


def emit_post_changed(event: str, author_id, post_id, extra: Optional[Dict[str, Any]] = None):
    # PostCreated / PostUpdated / PostDeleted: 대상은 작성자 자신
    emit(event, _payload(author_id, author_id, post_id=post_id, **(extra or {})))
