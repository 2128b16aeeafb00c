from django.contrib import admin

from .models import Comment, Post, PostLike


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "author", "is_public", "workout", "created_at")
    list_filter = ("is_public", "created_at")
    search_fields = ("id", "author__username", "content")
    inlines = [CommentInline]
    ordering = ("-created_at",)


@admin.register(PostLike)
class PostLikeAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "user", "created_at")
    search_fields = ("id", "post__id", "user__username")
    ordering = ("-created_at",)
