from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "username", "display_name", "is_active", "created_at")
    search_fields = ("id", "username", "display_name")
    ordering = ("-created_at",)

    def get_readonly_fields(self, request, obj=None):
        # username 은 생성 이후 고정
        return ("id", "username", "created_at") if obj else ("id", "created_at")
