from django.contrib import admin

from .models import Workout


@admin.register(Workout)
class WorkoutAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "name", "duration_min", "calories_burned", "performed_at")
    search_fields = ("id", "owner__username", "name")
    ordering = ("-performed_at",)
