import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("type", models.CharField(max_length=16, choices=[("follow", "Follow"), ("like", "Like"), ("comment", "Comment")])),
                ("payload", models.JSONField()),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("user", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", db_index=True)),
            ],
            options={
                "db_table": "notifications",
                "indexes": [models.Index(fields=["user", "is_read", "-created_at"], name="idx_notif_user_read_created")],
            },
        ),
    ]
