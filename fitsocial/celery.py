import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "fitsocial.settings")

# 워커 실행: celery -A fitsocial worker -l info
app = Celery("fitsocial")
app.config_from_object("django.conf:settings", namespace="CELERY")
# notifications.tasks.deliver_event 등 각 앱의 tasks 모듈을 자동 등록
app.autodiscover_tasks()
