import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("workouts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Post",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("content", models.TextField()),
                ("images", models.JSONField(blank=True, default=list)),
                ("is_public", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("author", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="posts", db_index=True)),
                ("workout", models.ForeignKey(to="workouts.workout", on_delete=django.db.models.deletion.SET_NULL, related_name="posts", null=True, blank=True)),
            ],
            options={
                "db_table": "posts",
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["author", "-created_at"], name="idx_post_author_created"),
                    models.Index(fields=["is_public", "-created_at"], name="idx_post_public_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PostLike",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("post", models.ForeignKey(to="posts.post", on_delete=django.db.models.deletion.CASCADE, related_name="likes")),
                ("user", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="post_likes")),
            ],
            options={
                "db_table": "post_likes",
                "constraints": [models.UniqueConstraint(fields=("user", "post"), name="uniq_post_like_user")],
                "indexes": [models.Index(fields=["post", "user"], name="idx_post_like_post_user")],
            },
        ),
        migrations.CreateModel(
            name="Comment",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("content", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("post", models.ForeignKey(to="posts.post", on_delete=django.db.models.deletion.CASCADE, related_name="comments", db_index=True)),
                ("author", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="comments")),
            ],
            options={
                "db_table": "comments",
                "ordering": ("created_at", "id"),
                "indexes": [models.Index(fields=["post", "created_at"], name="idx_comment_post_created")],
            },
        ),
    ]
