import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Follow",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("follower", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="following", db_index=True)),
                ("following", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="followers", db_index=True)),
            ],
            options={
                "db_table": "follows",
                "constraints": [
                    models.UniqueConstraint(fields=("follower", "following"), name="uq_follows_pair"),
                    models.CheckConstraint(condition=~models.Q(follower=models.F("following")), name="ck_follows_not_self"),
                ],
                "indexes": [
                    models.Index(fields=["follower", "-created_at"], name="idx_follows_follower"),
                    models.Index(fields=["following", "-created_at"], name="idx_follows_following"),
                ],
            },
        ),
    ]
