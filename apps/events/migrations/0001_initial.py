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
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200, verbose_name="Title")),
                ("description", models.TextField(blank=True)),
                ("category", models.CharField(blank=True, db_index=True, max_length=100)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("country", models.CharField(blank=True, max_length=100)),
                ("venue", models.CharField(blank=True, max_length=255)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("start_datetime", models.DateTimeField(verbose_name="Starts at")),
                ("end_datetime", models.DateTimeField(blank=True, null=True, verbose_name="Ends at")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Event",
                "verbose_name_plural": "Events",
                "ordering": ["start_datetime", "id"],
                "indexes": [models.Index(fields=["city", "start_datetime"], name="event_city_start_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_datetime__isnull", True), ("end_datetime__gte", models.F("start_datetime")), _connector="OR"),
                        name="event_end_after_start",
                    )
                ],
            },
        ),
    ]
