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
            name="Workout",
            fields=[
                ("id", models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ("name", models.CharField(max_length=100)),
                ("duration_min", models.PositiveIntegerField(default=0)),
                ("calories_burned", models.PositiveIntegerField(default=0)),
                ("performed_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("owner", models.ForeignKey(to=settings.AUTH_USER_MODEL, on_delete=django.db.models.deletion.CASCADE, related_name="workouts", db_index=True)),
            ],
            options={
                "db_table": "workouts",
                "ordering": ("-performed_at",),
                "indexes": [models.Index(fields=["owner", "-performed_at"], name="idx_workout_owner_performed")],
            },
        ),
    ]
