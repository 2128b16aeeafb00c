import pytest

from fitsocial.celery import app as celery_app


@pytest.fixture(autouse=True)
def _test_infra(settings):
    # 외부 인프라(브로커/Redis) 없이 동작하도록 고정
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True
    # namespace="CELERY" 설정은 Django settings 의 CELERY_* 값이 우선한다
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
    settings.FEED_CACHE_ENABLED = False

    import feed.services

    feed.services._cache = None
    yield
    feed.services._cache = None
