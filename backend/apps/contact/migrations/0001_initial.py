"""Initial contact submission table."""

from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="ContactSubmission",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("email", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("ip_address", models.CharField(blank=True, max_length=64, null=True)),
                ("read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "contact_submissions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["read", "created_at"], name="contact_read_created_idx")
                ],
            },
        ),
    ]
