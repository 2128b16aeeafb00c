from django.dispatch import receiver

from common import events

from .services import invalidate_for_follow_change, invalidate_for_post_change


@receiver(events.user_followed)
@receiver(events.user_unfollowed)
def on_follow_changed(sender, actor_id, **kwargs):
    invalidate_for_follow_change(actor_id)


@receiver(events.post_created)
@receiver(events.post_updated)
@receiver(events.post_deleted)
def on_post_changed(sender, actor_id, **kwargs):
    invalidate_for_post_change(actor_id)
