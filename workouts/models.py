import uuid

from django.conf import settings
from django.db import models


class Workout(models.Model):
    # 운동 기록 본체는 별도 도메인. 소셜 쪽에서는 존재 여부와 요약만 읽는다.
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="workouts", db_index=True)
    name = models.CharField(max_length=100)
    duration_min = models.PositiveIntegerField(default=0)
    calories_burned = models.PositiveIntegerField(default=0)
    performed_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "workouts"
        ordering = ("-performed_at",)
        indexes = [
            models.Index(fields=["owner", "-performed_at"], name="idx_workout_owner_performed"),
        ]

    def __str__(self):
        return f"Workout<{self.id}> {self.name}"
