from rest_framework import serializers

from .models import Workout


class WorkoutSummaryOut(serializers.ModelSerializer):
    class Meta:
        model = Workout
        fields = ("id", "name", "duration_min", "calories_burned", "performed_at")
        read_only_fields = fields
